"""
Main entry point for gifcap.

Records the screen of an attached Android device until CTRL+C is pressed, then
converts the recording into a GIF (default: output.gif).

    python main.py [-s <serial>] [output.gif]
"""
import sys

from gifcap.app import main


if __name__ == "__main__":
    sys.exit(main())
