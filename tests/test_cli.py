import pytest

from qrmux.frames import encode_frame
from qrmux.sender import generate_frames
from qrmux_com import cli, sender


def test_no_command_exits():
    with pytest.raises(SystemExit) as exc:
        cli.main([])
    assert exc.value.code == 1


def test_unknown_command_exits():
    with pytest.raises(SystemExit) as exc:
        cli.main(["beam"])
    assert exc.value.code == 1


def test_send_no_display_requires_output(tmp_path):
    src = tmp_path / "in.txt"
    src.write_text("Hi", encoding="utf-8")
    with pytest.raises(SystemExit):
        sender.main([str(src), "--no-display"])


def test_send_writes_pngs(tmp_path, capsys):
    src = tmp_path / "in.txt"
    src.write_text("z" * 1700, encoding="utf-8")
    out = tmp_path / "pngs"
    cli.main(["send", str(src), "--no-display", "--png-dir", str(out), "--scale", "2"])
    assert sorted(p.name for p in out.iterdir()) == [
        "frame_00000.png",
        "frame_00001.png",
        "frame_00002.png",
    ]
    assert "[send] chars=1700 frames=3" in capsys.readouterr().out


def test_receive_missing_video_reports_error(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["receive", "--input", str(tmp_path / "absent.mp4"), "--output", "-"])
    assert exc.value.code == 2
    assert "Unable to open" in capsys.readouterr().err


def test_frames_then_join(tmp_path, capsys):
    text = "line one\nline two still two\n" * 40
    src = tmp_path / "in.txt"
    src.write_text(text, encoding="utf-8")
    cli.main(["frames", str(src), "--chunk-size", "50"])
    lines = [line for line in capsys.readouterr().out.split("\n") if line]
    assert len(lines) > 1

    wire = tmp_path / "frames.txt"
    wire.write_text("\n".join(reversed(lines)) + "\n", encoding="utf-8")
    out = tmp_path / "out.txt"
    cli.main(["join", str(wire), "--output", str(out)])
    assert out.read_text(encoding="utf-8") == text


def test_join_reports_missing_frames(tmp_path, capsys):
    wire = tmp_path / "frames.txt"
    wire.write_text(encode_frame("a", 0, 3) + "\n" + encode_frame("c", 2, 3) + "\n", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        cli.main(["join", str(wire)])
    assert exc.value.code == 2
    assert "Missing frames: 1" in capsys.readouterr().err


def test_join_strict_checksum(tmp_path, capsys):
    raw = generate_frames("Hi")[0].replace('"d":"Hi"', '"d":"Xi"')
    wire = tmp_path / "frames.txt"
    wire.write_text(raw + "\n", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        cli.main(["join", str(wire), "--strict"])
    assert exc.value.code == 3
    cli.main(["join", str(wire)])
    captured = capsys.readouterr()
    assert captured.out == "Xi"
    assert "Checksum mismatch" in captured.err
