import dataclasses
import sys

from rich.pretty import pprint

from subcmd import *


@dataclasses.dataclass
class Roster:
    """
    a tiny employee roster driven by subcommands:

        python main.py list -reverse
        python main.py add "Ada Lovelace"
        python main.py help add
    """
    employees: list = dataclasses.field(default_factory=list)

    def subcmds(self):
        return commands(
            ("list", self.list, "list employees", params(
                ("-reverse", Kind.BOOL, False, "reverse order of list"),
            )),
            ("add", self.add, "add new employee", params(
                ("name", Kind.STRING, "", "employee name"),
            )),
        )

    def list(self, ctx, reverse, rest):
        pprint(sorted(self.employees, reverse=reverse))

    def add(self, ctx, name, rest):
        if name in self.employees:
            return ValueError("%s is already on the roster" % name)
        self.employees.append(name)


if __name__ == '__main__':
    sys.exit(main(Roster(["Grace Hopper", "Alan Turing"])))
