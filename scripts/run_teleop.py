"""Send one teleop command to simulated action services from the command line."""

from mobility_teleop.io.teleop_cli import main

if __name__ == "__main__":
    main()
