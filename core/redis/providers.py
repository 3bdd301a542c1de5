from dishka import Provider, Scope, provide, FromComponent
from typing import Annotated, Any, AsyncIterable
from core.environment.config import Settings
from redis.asyncio import Redis
import json

Key = tuple[str, ...]

KEY_SEPARATOR = ":"
GLOB_SPECIAL_CHARS = "*?[]\\"


class RedisProvider(Provider):
    """
    Provider for Redis client.
    """

    scope = Scope.APP
    component = "redis"

    @provide(scope=Scope.APP)
    async def provide_redis_client(
        self,
        settings: Annotated[Settings, FromComponent("environment")]
    ) -> AsyncIterable[Redis]:
        """
        Create Redis client for the application.

        Parameters
        ----------
        settings : Settings
            Application settings

        Yields
        ------
        Redis
            Redis client instance
        """
        redis_client = Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=settings.redis_password if settings.redis_password else None,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )

        try:
            await redis_client.ping()
            yield redis_client
        except Exception as e:
            raise ConnectionError(f"Failed to connect to Redis: {e}")
        finally:
            await redis_client.aclose()


class KeyValueStore:
    """
    Persistent mapping from composite keys (tuples of strings) to JSON values.

    Keys are stored in Redis as ``<namespace>:<part>:<part>...``. Listing by
    prefix returns entries sorted by their key tuple. Redis errors are not
    caught here and reach the caller unchanged.

    Parameters
    ----------
    redis_client : Redis
        Redis client instance
    namespace : str
        Prefix shared by every key of this store
    """

    def __init__(self, redis_client: Redis, namespace: str):
        self.redis = redis_client
        self.namespace = namespace

    def _encode_key(self, key: Key) -> str:
        if not key:
            raise ValueError("Key must have at least one part")
        for part in key:
            if not part or KEY_SEPARATOR in part:
                raise ValueError(f"Invalid key part: {part!r}")
        return KEY_SEPARATOR.join((self.namespace, *key))

    def _decode_key(self, raw: str) -> Key:
        return tuple(raw.split(KEY_SEPARATOR)[1:])

    @staticmethod
    def _escape_glob(value: str) -> str:
        return "".join(f"\\{c}" if c in GLOB_SPECIAL_CHARS else c for c in value)

    async def get(self, key: Key) -> Any | None:
        """
        Get value stored under key.

        Parameters
        ----------
        key : Key
            Composite key

        Returns
        -------
        Any | None
            Decoded value or None when the key is absent
        """
        value = await self.redis.get(self._encode_key(key))
        if value is None:
            return None
        return json.loads(value)

    async def set(self, key: Key, value: Any) -> None:
        """
        Store value under key, replacing any previous value.

        Parameters
        ----------
        key : Key
            Composite key
        value : Any
            JSON-serializable value
        """
        await self.redis.set(self._encode_key(key), json.dumps(value))

    async def list_by_prefix(self, prefix: Key) -> list[tuple[Key, Any]]:
        """
        List all entries whose key strictly extends prefix.

        Parameters
        ----------
        prefix : Key
            Leading key parts

        Returns
        -------
        list[tuple[Key, Any]]
            (key, value) pairs ordered by key
        """
        pattern = self._escape_glob(self._encode_key(prefix)) + KEY_SEPARATOR + "*"
        raw_keys = sorted(
            [raw async for raw in self.redis.scan_iter(match=pattern)],
            key=self._decode_key
        )
        if not raw_keys:
            return []

        values = await self.redis.mget(raw_keys)
        entries = []
        for raw, value in zip(raw_keys, values):
            # key may have been deleted between SCAN and MGET
            if value is None:
                continue
            entries.append((self._decode_key(raw), json.loads(value)))
        return entries


class KeyValueProvider(Provider):
    """
    Provider for the key-value store.
    """

    component = "kv"
    scope = Scope.APP

    @provide(scope=Scope.APP)
    def provide_kv_store(
        self,
        redis_client: Annotated[Redis, FromComponent("redis")],
        settings: Annotated[Settings, FromComponent("environment")]
    ) -> KeyValueStore:
        """
        Provide key-value store.

        Parameters
        ----------
        redis_client : Redis
            Redis client instance
        settings : Settings
            Application settings

        Returns
        -------
        KeyValueStore
            Key-value store instance
        """
        return KeyValueStore(redis_client, namespace=settings.kv_namespace)
