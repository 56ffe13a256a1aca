"""Allow ``python -m otel_stdout_demo``."""

from otel_stdout_demo.cli import main

if __name__ == "__main__":
    main()
