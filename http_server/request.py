from dataclasses import dataclass


@dataclass
class Request:
    method: str
    path: str
    headers: dict[str, str]
    query_params: dict[str, list]
    body: bytes
    version: str

    @property
    def keep_alive(self) -> bool:
        connection = self.headers.get('connection', '').lower()
        if self.version.upper() == 'HTTP/1.0':
            return connection == 'keep-alive'
        return connection != 'close'
