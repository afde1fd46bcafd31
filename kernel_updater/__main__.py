import sys


def cli() -> None:
    """Console entry point.

    archinstall parses sys.argv with its own installer options when it is
    first imported, so the command line is taken off sys.argv before
    kernel_updater.main (and with it archinstall) is loaded.
    """
    argv = sys.argv[1:]
    sys.argv = sys.argv[:1]

    from kernel_updater.main import main

    sys.exit(main(argv))


if __name__ == "__main__":
    cli()
