import json
import subprocess
import sys

import pytest

from alignment.splicer import AudioSplicer, SpliceError


@pytest.fixture
def recording_script(tmp_path):
    """A splice script that records its arguments and exits with a given code."""
    record = tmp_path / "argv.json"
    script = tmp_path / "splice.py"
    script.write_text(
        "import json, sys\n"
        f"json.dump(sys.argv[1:], open({str(record)!r}, 'w'))\n"
        "sys.stderr.write('boom')\n"
        "sys.exit(int(sys.argv[2].endswith('fail.wav')) * 3)\n"
    )
    return script, record


def test_splice_at_next_word_passes_start_times(recording_script):
    script, record = recording_script
    splicer = AudioSplicer([sys.executable, str(script)])

    code = splicer.splice_at_next_word("in file.wav", "out.wav", "1.0,0.5,0.0,")

    assert code == 0
    assert json.loads(record.read_text()) == ["in file.wav", "out.wav", "1.0,0.5,0.0,"]


def test_splice_at_word_end_passes_both_lists(recording_script):
    script, record = recording_script
    splicer = AudioSplicer([sys.executable, str(script)])

    splicer.splice_at_word_end("in.wav", "out.wav", "1.0,0.5,", "1.6,1.0,")

    assert json.loads(record.read_text()) == ["in.wav", "out.wav", "1.0,0.5,", "1.6,1.0,"]


def test_paths_are_not_shell_interpreted(recording_script, tmp_path):
    script, record = recording_script
    splicer = AudioSplicer([sys.executable, str(script)])

    splicer.splice_at_next_word("a.wav; touch hacked", "out.wav", "0.0,")

    assert json.loads(record.read_text())[0] == "a.wav; touch hacked"
    assert not (tmp_path / "hacked").exists()


def test_non_zero_exit_raises(recording_script):
    script, _ = recording_script
    splicer = AudioSplicer([sys.executable, str(script)])

    with pytest.raises(SpliceError) as excinfo:
        splicer.splice_at_next_word("in.wav", "fail.wav", "0.0,")

    assert excinfo.value.returncode == 3
    assert excinfo.value.stderr == "boom"


def test_non_zero_exit_returned_when_unchecked(recording_script):
    script, _ = recording_script
    splicer = AudioSplicer([sys.executable, str(script)], check=False)

    assert splicer.splice_at_word_end("in.wav", "fail.wav", "0.0,", "0.5,") == 3


def test_timeout_kills_splice_script(tmp_path):
    script = tmp_path / "hang.py"
    script.write_text("import time\ntime.sleep(30)\n")
    splicer = AudioSplicer([sys.executable, str(script)], timeout=0.5)

    with pytest.raises(subprocess.TimeoutExpired):
        splicer.splice_at_next_word("in.wav", "out.wav", "0.0,")


def test_missing_command_raises_os_error(tmp_path):
    splicer = AudioSplicer([str(tmp_path / "no-such-program")])

    with pytest.raises(OSError):
        splicer.splice_at_next_word("in.wav", "out.wav", "0.0,")


def test_default_command_uses_splice_script(monkeypatch):
    import constants

    monkeypatch.setattr(constants, "splice_script", "spliceAudio.py")
    monkeypatch.setattr(constants, "splice_timeout", 42.0)
    splicer = AudioSplicer()

    assert splicer.command == [sys.executable, "spliceAudio.py"]
    assert splicer.timeout == 42.0
    assert splicer.check is True
