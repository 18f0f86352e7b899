import pytest


def build_ppm(width, height, pixels, max_val=255, comments=(), magic=b"P6"):
    """Assemble the bytes of a P6 file. pixels is a flat list of samples."""
    header = magic + b"\n"
    for comment in comments:
        header += b"#" + comment + b"\n"
    header += f"{width} {height}\n{max_val}\n".encode("ascii")
    return header + bytes(pixels)


@pytest.fixture
def two_by_one():
    return build_ppm(2, 1, [10, 20, 30, 200, 210, 220])


@pytest.fixture
def write_file(tmp_path):
    def _write(data, name="image.ppm"):
        path = tmp_path / name
        path.write_bytes(data)
        return str(path)
    return _write
