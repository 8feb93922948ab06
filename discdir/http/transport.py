import logging
import typing as t
from urllib.parse import quote

import httpx

import discdir.transport
from discdir.config import DEFAULT_TIMEOUT, Settings
from discdir.models import Submission
from discdir.transport import ConnectionClosed, TransportError

logger = logging.getLogger(__name__)


def _path(template: str, value: str) -> str:
    return template.format(quote(value, safe=''))


def _reason(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and isinstance(data.get('error'), str):
        return data['error']
    return response.text or f"HTTP {response.status_code} {response.reason_phrase}"


class Connection(discdir.transport.BaseConnection):
    """ This class fully implements the `discdir.transport.Connection`
    protocol on top of the registry's HTTP API.
    """

    def __init__(self, url: str, timeout: float = DEFAULT_TIMEOUT,
                 transport: httpx.AsyncBaseTransport = None):
        super().__init__()
        self._url = url
        self._timeout = timeout
        self._transport = transport
        self.__client = None  # type: httpx.AsyncClient | None

    @property
    def client(self) -> httpx.AsyncClient:
        if self.connected and self.__client is not None:
            return self.__client
        raise ConnectionClosed()

    async def open_connection(self, *args: t.Any, **kwargs: t.Any) -> None:
        self.__client = httpx.AsyncClient(base_url=self._url, timeout=self._timeout, transport=self._transport,
                                          headers={'Accept': 'application/json'})
        await super().open_connection(*args, **kwargs)

    async def close_connection(self) -> None:
        await super().close_connection()
        client, self.__client = self.__client, None
        if client is not None:
            await client.aclose()

    async def _request(self, method: str, path: str, **kwargs: t.Any) -> httpx.Response:
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            logger.debug(f"Registry# {self._url}; {method} {path} failed: {exc}")
            raise TransportError(f"Cannot connect to registry at {self._url}") from exc
        if not self.connected:
            raise ConnectionClosed()
        if not response.is_success:
            raise TransportError(_reason(response), response.status_code)
        return response

    async def _request_json(self, method: str, path: str, **kwargs: t.Any) -> t.Any:
        response = await self._request(method, path, **kwargs)
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(f"Malformed registry response; {exc}") from exc

    async def _send_submission(self, body: dict[str, t.Any], contributor_id: str | None, program_id: str) -> None:
        headers = {'user_id': contributor_id} if contributor_id else {}
        await self._request('POST', _path('/upload_discriminator/{}', program_id), json=body, headers=headers)

    async def _recv_discriminators(self, program_id: str) -> t.Any:
        try:
            return await self._request_json('GET', _path('/query_discriminators/{}', program_id))
        except TransportError as exc:
            # The registry answers 404 when it knows nothing about the program.
            if exc.status == httpx.codes.NOT_FOUND:
                return []
            raise exc

    async def _recv_instructions(self, discriminator_id: str) -> t.Any:
        return await self._request_json('GET', _path('/query_instructions/{}', discriminator_id))

    async def _recv_health(self) -> str:
        response = await self._request('GET', '/health')
        return response.text


class Transport(discdir.transport.Transport):
    """ Transport that talks to the discriminator registry over HTTP.

    Args:
        url: Base URL of the registry, `http://localhost:8080` by default.
        contributor_id: Contributor recorded with submissions unless another one is given.
        host: Changes the host in the default URL if it is set.
        port: Changes the port in the default URL if it is set.
        timeout: Request timeout in seconds.
        transport: An `httpx` transport to send requests through instead of the network.
    """

    def __init__(self, url: str = None, /, contributor_id: str = None,
                 host: str = 'localhost', port: int = 8080, timeout: float = DEFAULT_TIMEOUT,
                 transport: httpx.AsyncBaseTransport = None):
        self._url = (url or f'http://{host}:{port}').rstrip('/')
        self._contributor_id = contributor_id
        self._timeout = timeout
        self._transport = transport
        super().__init__()

    @classmethod
    def from_settings(cls, settings: Settings = None, **kwargs: t.Any) -> 'Transport':
        """ Creates a transport from :class:`~discdir.config.Settings`;
        environment settings are used if none are given. """
        settings = settings or Settings.from_env()
        return cls(settings.url, contributor_id=settings.contributor_id, timeout=settings.timeout, **kwargs)

    @property
    def url(self) -> str:
        return self._url

    async def submit(self, submission: Submission, contributor_id: str | None = None) -> None:
        """ Submits a discriminator; see :meth:`discdir.transport.Transport.submit`.
        The transport's contributor is used when `contributor_id` is not given. """
        await super().submit(submission, contributor_id or self._contributor_id)

    def _connection_factory(self, *args: t.Any, **kwargs: t.Any) -> Connection:
        # Binding to a concrete connection class.
        return Connection(self._url, self._timeout, self._transport)
