import json
import logging

import pytest

from main import main
from utils.logging_config import LOGGER_NAMESPACES


@pytest.fixture(autouse=True)
def restore_loggers():
    yield
    # main() binds handlers to the captured stderr of the test that ran it
    for name in LOGGER_NAMESPACES:
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.propagate = True


@pytest.fixture
def program(tmp_path):
    path = tmp_path / "part.nc"
    path.write_text("G0 X10 Y10\nG1 X20 F100\nG2 X30 Y10 I5 J0\nM2\n")
    return path


class TestCommands:
    def test_check(self, program, capsys) -> None:
        assert main(["check", str(program)]) == 0
        assert capsys.readouterr().out.strip() == "OK: 3 motions"

    def test_summary(self, program, capsys) -> None:
        assert main(["summary", str(program)]) == 0
        summary = json.loads(capsys.readouterr().out)
        assert summary["motions"] == 3
        assert summary["move_types"]["arc"] == 1
        assert summary["bounding_box"]["max"][0] == pytest.approx(30.0)

    def test_segments_to_stdout(self, program, capsys) -> None:
        assert main(["segments", str(program)]) == 0
        segments = json.loads(capsys.readouterr().out)
        assert segments[0] == {
            "line": 1,
            "color": "rapid",
            "start": [0.0, 0.0, 0.0],
            "end": [10.0, 10.0, 0.0],
        }
        assert segments[-1]["end"] == [30.0, 10.0, 0.0]

    def test_segments_to_file(self, program, tmp_path, capsys) -> None:
        output = tmp_path / "segments.json"
        assert main(["segments", str(program), "-o", str(output)]) == 0
        assert capsys.readouterr().out == ""
        segments = json.loads(output.read_text())
        assert {s["color"] for s in segments} == {"rapid", "feed"}

    def test_preset_changes_tessellation(self, program, tmp_path) -> None:
        fine = tmp_path / "fine.json"
        coarse = tmp_path / "coarse.json"
        main(["--preset", "fine", "segments", str(program), "-o", str(fine)])
        main(["--preset", "coarse", "segments", str(program), "-o", str(coarse)])
        assert len(json.loads(coarse.read_text())) < len(json.loads(fine.read_text()))

    def test_config_file(self, program, tmp_path, capsys) -> None:
        config = tmp_path / "preview.json"
        config.write_text(json.dumps({"arc_absolute_tolerance": 0.01}))
        assert main(["--config", str(config), "check", str(program)]) == 0
        assert "OK" in capsys.readouterr().out

    def test_log_file(self, program, tmp_path) -> None:
        log_file = tmp_path / "run.log"
        main(["--log-level", "INFO", "--log-file", str(log_file), "check", str(program)])
        assert "Processed 5 lines" in log_file.read_text()


class TestFailures:
    def test_gcode_error_exit_code(self, tmp_path, capsys) -> None:
        path = tmp_path / "bad.nc"
        path.write_text("G0 X1\nG1 X2 E5\n")
        assert main(["check", str(path)]) == 1
        err = capsys.readouterr().err
        assert f"{path}: Line 2: Expected a valid G-code letter" in err

    def test_unknown_command_exit_code(self, tmp_path, capsys) -> None:
        path = tmp_path / "bad.nc"
        path.write_text("G0 X1\nG17\n")
        assert main(["summary", str(path)]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Line 2: Unknown command: G17" in captured.err

    def test_missing_file(self, tmp_path, capsys) -> None:
        assert main(["check", str(tmp_path / "absent.nc")]) == 2
        assert capsys.readouterr().err.startswith("error:")

    def test_file_that_is_not_utf8(self, tmp_path, capsys) -> None:
        path = tmp_path / "latin1.nc"
        path.write_bytes(b"G0 X1 (caf\xe9)\n")
        assert main(["check", str(path)]) == 2
        assert capsys.readouterr().err.startswith("error:")

    def test_unknown_preset(self, program, capsys) -> None:
        assert main(["--preset", "ultra", "check", str(program)]) == 2
        assert "ultra" in capsys.readouterr().err

    def test_subcommand_is_required(self) -> None:
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 2
