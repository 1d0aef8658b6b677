"""Package entry point for ``python -m whisper_srt``.

WHY: Users run the converter as ``python -m whisper_srt input.mp3`` as well
as through the ``whisper-srt`` console script.

HOW: Delegates to the CLI's main() function.
"""

from whisper_srt.cli import main

if __name__ == "__main__":
    main()
