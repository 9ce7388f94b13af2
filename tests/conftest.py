import zlib

import pytest


# ------------------------------------------------------------------
# Minimal text PDFs
#
# Single page, Helvetica, one text line per argument. With
# compress=True the content stream is Flate encoded, so the text is
# only visible to a PDF parser, not in the raw bytes.
# ------------------------------------------------------------------

def pdf_with_text(*lines: str, compress: bool = False) -> bytes:
    ops = ["BT", "/F1 12 Tf", "72 720 Td"]
    for i, line in enumerate(lines):
        if i:
            ops.append("0 -16 Td")
        escaped = line.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
        ops.append(f"({escaped}) Tj")
    ops.append("ET")
    stream = "\n".join(ops).encode("ascii")

    stream_dict = b"<< /Length %d >>" % len(stream)
    if compress:
        stream = zlib.compress(stream)
        stream_dict = b"<< /Length %d /Filter /FlateDecode >>" % len(stream)

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Resources << /Font << /F1 5 0 R >> >> /Contents 4 0 R >>",
        stream_dict + b"\nstream\n" + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_offset = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\n" % (len(objects) + 1)
    out += b"startxref\n%d\n%%%%EOF\n" % xref_offset

    return bytes(out)


@pytest.fixture
def write_pdf(tmp_path):
    """Write bytes to a file in tmp_path and return (bytes, path)."""

    def _write(content: bytes, name: str = "manuscript.pdf"):
        path = tmp_path / name
        path.write_bytes(content)
        return content, str(path)

    return _write


class SleepRecorder:
    """Stand-in for time.sleep that records the requested delays."""

    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def sleep():
    return SleepRecorder()


@pytest.fixture
def make_pdf():
    return pdf_with_text
