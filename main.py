from rich import print

from flagship import *

__prog__ = "flagship-demo"

catalog = Catalog()

Build = Enumeration(
    "Build",
    Member("None", 0),
    Member("Verbose", 1, long="verbose", short="v", descr="Show detailed output"),
    Member("Debug", 2, long="debug", short="d", descr="Keep debug symbols"),
    Member("NoCache", 4, descr="Ignore the build cache"),
    flags=True,
)


@catalog.command(
    Positional("name", descr="The name of the person to greet"),
    Flag("uppercase", long="uppercase", short="u", descr="Print the greeting in uppercase"),
    Flag("repeat", long="repeat", short="r", type=Primitive.INT32, default=1, descr="Number of times to repeat"),
)
def greet(args):
    """Greets a person by name"""
    greeting = f"Hello, {args.name}!"
    for _ in range(args.repeat):
        print(greeting.upper() if args.uppercase else greeting)


@catalog.command(
    Positional("project", descr="The project to build"),
    Flag("jobs", long="jobs", short="j", type=Primitive.INT32, default=1, descr="Parallel jobs"),
    FlagsEnum("options", Build),
)
def build(args):
    """Builds a project"""
    enabled = [member.name for member in Build.bits if args.options & member.value]
    print(f"building {args.project} with {args.jobs} job(s); options: {", ".join(enabled) or "none"}")


if __name__ == '__main__':
    raise SystemExit(invoke(catalog, colorful=True))
