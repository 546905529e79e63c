from dataclasses import dataclass, field


@dataclass
class Response:
    status: int = 200
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    def text(self, message: str) -> 'Response':
        headers = self.headers
        headers['content-type'] = 'text/plain; charset=utf-8'

        return Response(
            status=self.status,
            headers=headers,
            body=(message + "\n").encode()
        )

    def data(self, payload: bytes) -> 'Response':
        headers = self.headers
        headers.setdefault('content-type', 'application/octet-stream')

        return Response(
            status=self.status,
            headers=headers,
            body=payload
        )

def response(status_code: int = 200, headers: dict[str, str] | None = None) -> Response:
    return Response(
        status=status_code,
        headers={} if headers is None else headers
    )
