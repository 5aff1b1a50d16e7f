import attrs


@attrs.frozen
class QrArtifact:
    url: str
    path: str
    data_url: str  # inline PNG for API consumers that display it directly


@attrs.frozen
class PdfArtifact:
    url: str
    path: str
    content: bytes = attrs.field(repr=lambda c: f'<{len(c)} bytes>')
