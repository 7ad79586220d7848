from pathlib import Path

from PIL import Image

from rbxmx_image.attributes import decode_attributes_base64
from rbxmx_image.binary_image import decode_image_data
from rbxmx_image.cli import main


def _sample_png(directory: Path, name: str = "sample.png") -> Path:
    path = directory / name
    image = Image.new("RGB", (6, 3))
    image.putdata([(x * 40, y * 80, 20) for y in range(3) for x in range(6)])
    image.save(path)
    return path


def test_converts_and_reports(tmp_path, capsys) -> None:
    source = _sample_png(tmp_path)

    assert main(["3", str(source)]) == 0

    out = capsys.readouterr().out
    assert "Resized image to 6, 3" in out
    assert "colors, 18 indices" in out
    output = tmp_path / "sample.rbxmx"
    assert f"Wrote image to file {output}" in out
    assert output.exists()


def test_custom_template_and_output(tmp_path, capsys) -> None:
    source = _sample_png(tmp_path)
    template = tmp_path / "tpl.txt"
    template.write_text("`attributes`")
    output = tmp_path / "custom.out"
    preview = tmp_path / "preview.png"

    code = main(
        [
            "2",
            str(source),
            "--template",
            str(template),
            "-o",
            str(output),
            "--matcher",
            "linear",
            "--preview",
            str(preview),
        ]
    )

    assert code == 0
    attributes = decode_attributes_base64(output.read_text())
    image = decode_image_data(attributes[0].data)
    assert (image.width, image.height) == (4, 2)
    assert len(image.records) == 8
    assert preview.exists()


def test_extension_option(tmp_path) -> None:
    source = _sample_png(tmp_path)

    assert main(["3", str(source), "--extension", ".txt"]) == 0
    assert (tmp_path / "sample.txt").exists()


def test_missing_arguments_exit_with_one(capsys) -> None:
    assert main([]) == 1
    assert main(["10"]) == 1
    assert "error" in capsys.readouterr().err


def test_invalid_height_exit_with_one(tmp_path, capsys) -> None:
    source = _sample_png(tmp_path)

    assert main(["0", str(source)]) == 1
    assert main(["-5", str(source)]) == 1
    assert main(["tall", str(source)]) == 1

    assert "Invalid image size" in capsys.readouterr().err
    assert not (tmp_path / "sample.rbxmx").exists()


def test_decode_failure_exit_with_one(tmp_path, capsys) -> None:
    assert main(["4", str(tmp_path / "missing.png")]) == 1
    assert "missing.png" in capsys.readouterr().err


def test_template_failure_exit_with_one(tmp_path, capsys) -> None:
    source = _sample_png(tmp_path)

    assert main(["3", str(source), "--template", str(tmp_path / "none.txt")]) == 1
    assert "template" in capsys.readouterr().err
    assert not (tmp_path / "sample.rbxmx").exists()


def test_output_failure_exit_with_one(tmp_path) -> None:
    source = _sample_png(tmp_path)

    assert main(["3", str(source), "-o", str(tmp_path / "no-dir" / "x.rbxmx")]) == 1


def test_invalid_tolerance_exit_with_one(tmp_path, capsys) -> None:
    source = _sample_png(tmp_path)

    for tolerance in ("-1", "0", "nan", "loose"):
        assert main(["2", str(source), "--tolerance", tolerance, "--matcher", "linear"]) == 1

    assert "Invalid tolerance" in capsys.readouterr().err
    assert not (tmp_path / "sample.rbxmx").exists()


def test_tolerance_option(tmp_path) -> None:
    source = _sample_png(tmp_path)

    assert main(["3", str(source), "--tolerance", "0.5"]) == 0
    assert (tmp_path / "sample.rbxmx").exists()


def test_oversized_image_exit_with_one(tmp_path, capsys, monkeypatch) -> None:
    source = _sample_png(tmp_path)
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 4)

    assert main(["3", str(source)]) == 1
    assert "too large" in capsys.readouterr().err
    assert not (tmp_path / "sample.rbxmx").exists()
