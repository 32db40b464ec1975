import subprocess
import sys
from typing import List, Sequence

from halo import Halo

import constants


class SpliceError(RuntimeError):
    """The splice script exited with a non-zero status."""

    def __init__(self, returncode: int, stderr: str):
        super().__init__(
            f"Splice script failed with exit code {returncode}: {stderr}"
        )
        self.returncode = returncode
        self.stderr = stderr


class AudioSplicer:
    """
    Runs the external splice script that cuts the input audio at the given
    timestamps and joins the pieces, in order, into the output file.

    The script is called as ``<command> input output starts [ends]``.
    """

    def __init__(
        self,
        command: Sequence[str] | None = None,
        timeout: float | None = None,
        check: bool = True,
    ):
        if command is None:
            command = [sys.executable, constants.splice_script]
        self.command = list(command)
        self.timeout = constants.splice_timeout if timeout is None else timeout
        self.check = check

    def splice_at_next_word(
        self, input_path: str, output_path: str, starts: str
    ) -> int:
        """
        Cut every word where the next one begins. No gaps, but noise before
        the next word is kept.
        """
        return self._run([input_path, output_path, starts])

    def splice_at_word_end(
        self, input_path: str, output_path: str, starts: str, ends: str
    ) -> int:
        """
        Cut every word at its own end, dropping the silence between words.
        """
        return self._run([input_path, output_path, starts, ends])

    def _run(self, args: List[str]) -> int:
        spinner = Halo(text="Splicing audio...").start()
        try:
            result = subprocess.run(
                self.command + args,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired):
            spinner.fail("Could not run splice script.")
            raise

        if result.returncode != 0:
            if self.check:
                spinner.fail("Splicing failed.")
                raise SpliceError(result.returncode, result.stderr)
            spinner.warn(f"Splice script exited with code {result.returncode}.")
        else:
            spinner.succeed(f"Audio written to {args[1]}.")
        return result.returncode
