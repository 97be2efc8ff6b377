"""
Поддельный backend для тестов

HTTP подменяется MagicMock'ом вместо requests.Session: запросы
маршрутизируются в FakeBackend, который возвращает настоящие
requests.Response или бросает исключения requests.
"""

import json
from typing import Any, Dict, List, Optional, Tuple

import requests

BASE_URL = "http://testserver/api"


def make_response(status_code: int = 200, data: Any = None, text: Optional[str] = None) -> requests.Response:
    """Собирает requests.Response с JSON или текстовым телом"""
    response = requests.Response()
    response.status_code = status_code
    response.reason = "Test"
    response.url = BASE_URL
    if data is not None:
        response._content = json.dumps(data).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    elif text is not None:
        response._content = text.encode("utf-8")
        response.headers["Content-Type"] = "text/plain"
    else:
        response._content = b""
    return response


class FakeBackend:
    """
    Маршрутизатор запросов по (метод, путь).

    Значение маршрута: requests.Response, исключение, список
    (отдаётся по одному элементу на вызов) или callable(call) -> Response.
    """

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Any] = {}
        self.calls: List[Dict[str, Any]] = []

    def on(self, method: str, path: str, result: Any) -> None:
        self.routes[(method.upper(), path)] = result

    def on_json(self, method: str, path: str, data: Any = None, status_code: int = 200) -> None:
        self.on(method, path, make_response(status_code, data))

    def paths(self, method: Optional[str] = None) -> List[str]:
        return [c["path"] for c in self.calls if method is None or c["method"] == method]

    def __call__(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        path = url[len(BASE_URL):] if url.startswith(BASE_URL) else url
        call = {"method": method, "path": path, **kwargs}
        self.calls.append(call)

        key = (method, path)
        if key not in self.routes:
            return make_response(404, {"detail": "Not found."})

        result = self.routes[key]
        if isinstance(result, list):
            result = result.pop(0) if len(result) > 1 else result[0]
        if isinstance(result, BaseException):
            raise result
        if callable(result) and not isinstance(result, requests.Response):
            return result(call)
        return result


