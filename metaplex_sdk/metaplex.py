"""
Metaplex: the SDK entry point.

Owns the RPC connection, the identity signer, the operation registry, the
program registry and the JSON loader. Plugins are installed with use(); the
default plugins (token and NFT modules) are installed by make() and
from_settings(). Registries live on the instance, so two Metaplex objects
never share handlers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Protocol

from solana.rpc.async_api import AsyncClient
from solders.keypair import Keypair

from metaplex_sdk.config import Settings, get_settings
from metaplex_sdk.config.env import mask_rpc_url
from metaplex_sdk.core.exceptions import MissingIdentityError, ValidationError
from metaplex_sdk.core.operation import Operation, OperationRegistry
from metaplex_sdk.core.program import ProgramRegistry
from metaplex_sdk.core.scope import CancellationScope
from metaplex_sdk.mx_logging import get_logger
from metaplex_sdk.rpc.client import RpcClient
from metaplex_sdk.storage.json_loader import HttpJsonLoader

if TYPE_CHECKING:
    from metaplex_sdk.plugins.nft_module.client import NftClient
    from metaplex_sdk.plugins.token_module.client import TokenClient

logger = get_logger(__name__)


class MetaplexPlugin(Protocol):
    def install(self, metaplex: Metaplex) -> None: ...


class Metaplex:
    def __init__(
        self,
        connection: AsyncClient,
        *,
        identity: Keypair | None = None,
        settings: Settings | None = None,
        json_loader: HttpJsonLoader | None = None,
    ) -> None:
        self.connection = connection
        self.settings = settings or get_settings()
        self._identity = identity if identity is not None else self.settings.identity
        self._operations = OperationRegistry()
        self._programs = ProgramRegistry()
        self._rpc = RpcClient(self)
        self._storage = json_loader or HttpJsonLoader(timeout=self.settings.json_fetch_timeout_sec)
        self._clients: dict[str, Callable[[Metaplex], Any]] = {}

    @classmethod
    def make(cls, connection: AsyncClient, **kwargs: Any) -> Metaplex:
        """Create an instance with the token and NFT modules installed."""
        from metaplex_sdk.plugins import core_plugins

        metaplex = cls(connection, **kwargs)
        for plugin in core_plugins():
            metaplex.use(plugin)
        return metaplex

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **kwargs: Any) -> Metaplex:
        """Open an AsyncClient on settings.rpc_url and install the default plugins."""
        settings = settings or get_settings()
        connection = AsyncClient(settings.rpc_url, commitment=settings.commitment)
        logger.info(
            "metaplex_connected",
            network=settings.network,
            commitment=settings.commitment,
            rpc_url=mask_rpc_url(settings.rpc_url),
        )
        return cls.make(connection, settings=settings, **kwargs)

    def use(self, plugin: MetaplexPlugin) -> Metaplex:
        plugin.install(self)
        return self

    def identity(self) -> Keypair:
        if self._identity is None:
            raise MissingIdentityError()
        return self._identity

    def set_identity(self, identity: Keypair) -> Metaplex:
        self._identity = identity
        return self

    def has_identity(self) -> bool:
        return self._identity is not None

    def operations(self) -> OperationRegistry:
        return self._operations

    def programs(self) -> ProgramRegistry:
        return self._programs

    def rpc(self) -> RpcClient:
        return self._rpc

    def storage(self) -> HttpJsonLoader:
        return self._storage

    def register_client(self, name: str, factory: Callable[[Metaplex], Any]) -> None:
        self._clients[name] = factory

    def _client(self, name: str) -> Any:
        factory = self._clients.get(name)
        if factory is None:
            raise ValidationError(f"No {name!r} client installed; use the matching plugin first")
        return factory(self)

    def nfts(self) -> NftClient:
        return self._client("nfts")

    def tokens(self) -> TokenClient:
        return self._client("tokens")

    async def run(self, operation: Operation[Any], scope: CancellationScope | None = None) -> Any:
        """Dispatch an operation through this instance's registry."""
        return await self._operations.handle(operation, self, scope)

    async def close(self) -> None:
        await self._storage.close()
        await self.connection.close()
