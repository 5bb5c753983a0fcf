"""Run the exo command line tool with `python -m exocortex`."""

from exocortex.tool.exo import main

if __name__ == "__main__":
    main()
