from __future__ import annotations

import logging
import os
import ssl
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException
from kubernetes.config.incluster_config import InClusterConfigLoader

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

SERVICE_ACCOUNT_DIR = Path("/var/run/secrets/kubernetes.io/serviceaccount")
DEFAULT_NAMESPACE = "default"
DEFAULT_TIMEOUT = 30.0


@dataclass
class RestConfig:
    """Connectivity settings for the cluster object store.

    ``token_source`` is set when credentials expire (exec plugins, projected
    service account tokens); it returns a current bearer token on each call.
    """

    host: str
    token: str | None = None
    ca_file: str | None = None
    cert_file: str | None = None
    key_file: str | None = None
    insecure_skip_tls_verify: bool = False
    namespace: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    token_source: Callable[[], str | None] | None = field(default=None, repr=False, compare=False)

    def bearer_token(self) -> str | None:
        if self.token_source is not None:
            return self.token_source()
        return self.token

    def ssl_verify(self) -> bool | ssl.SSLContext:
        """Return the ``verify`` argument for httpx."""

        if self.insecure_skip_tls_verify:
            return False
        if not (self.ca_file or self.cert_file):
            return True
        try:
            context = ssl.create_default_context(cafile=self.ca_file)
            if self.cert_file:
                context.load_cert_chain(self.cert_file, self.key_file)
        except (OSError, ssl.SSLError) as exc:
            raise ConfigurationError(f"Unable to load TLS material: {exc}") from exc
        return context


@dataclass
class ServerSettings:
    namespace: str = DEFAULT_NAMESPACE
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8888


def load_settings(environ: dict[str, str] | None = None) -> ServerSettings:
    env = os.environ if environ is None else environ
    raw_timeout = env.get("FISSION_STORE_TIMEOUT")
    raw_port = env.get("FISSION_PORT")
    try:
        timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
        port = int(raw_port) if raw_port else ServerSettings.port
    except ValueError as exc:
        raise ConfigurationError(f"Invalid numeric setting: {exc}") from exc
    return ServerSettings(
        namespace=env.get("FISSION_NAMESPACE") or DEFAULT_NAMESPACE,
        timeout=timeout,
        log_level=(env.get("FISSION_LOG_LEVEL") or "INFO").upper(),
        host=env.get("FISSION_HOST") or ServerSettings.host,
        port=port,
    )


def _bearer(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, value = authorization.partition(" ")
    if scheme.lower() != "bearer":
        raise ConfigurationError(
            f"Unsupported authorization scheme {scheme!r}; use a token or client certificate"
        )
    return value.strip() or None


def _empty_configuration() -> client.Configuration:
    cfg = client.Configuration()
    # cleared so a cluster entry without a server is detectable after loading
    cfg.host = ""
    return cfg


def _to_rest_config(cfg: client.Configuration, namespace: str | None) -> RestConfig:
    hook = cfg.refresh_api_key_hook

    def current_token() -> str | None:
        if hook is not None:
            try:
                hook(cfg)
            except ConfigException as exc:
                raise ConfigurationError(f"Unable to refresh credentials: {exc}") from exc
        return _bearer(cfg.api_key.get("authorization"))

    return RestConfig(
        host=cfg.host,
        token=_bearer(cfg.api_key.get("authorization")),
        ca_file=cfg.ssl_ca_cert,
        cert_file=cfg.cert_file,
        key_file=cfg.key_file,
        insecure_skip_tls_verify=not cfg.verify_ssl,
        namespace=namespace,
        token_source=current_token if hook is not None else None,
    )


def load_kubeconfig(path: str | os.PathLike[str], context: str | None = None) -> RestConfig:
    """Build a :class:`RestConfig` from a kubeconfig file (or ``os.pathsep`` list)."""

    config_file = os.fspath(path)
    cfg = _empty_configuration()
    try:
        contexts, active = config.list_kube_config_contexts(config_file=config_file)
        if context is not None:
            active = next((entry for entry in contexts if entry.get("name") == context), None)
            if active is None:
                raise ConfigurationError(f"kubeconfig has no context named '{context}'")
        config.load_kube_config(
            config_file=config_file,
            context=context,
            client_configuration=cfg,
            persist_config=False,
        )
    except ConfigException as exc:
        raise ConfigurationError(f"Invalid kubeconfig {config_file}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid kubeconfig {config_file}: {exc}") from exc

    details = active.get("context") or {}
    if not cfg.host:
        raise ConfigurationError(
            f"kubeconfig cluster for context '{active.get('name')}' has no server"
        )
    rest_config = _to_rest_config(cfg, details.get("namespace"))
    user = details.get("user")
    if user and not (rest_config.token or rest_config.cert_file):
        # the client library only logs exec and auth-provider failures
        raise ConfigurationError(
            f"kubeconfig user '{user}' did not yield a token or client certificate"
        )
    return rest_config


def in_cluster_config(
    environ: dict[str, str] | None = None, service_account_dir: Path | None = None
) -> RestConfig:
    """Build a :class:`RestConfig` from the pod's service account."""

    env = os.environ if environ is None else environ
    sa_dir = service_account_dir or SERVICE_ACCOUNT_DIR
    cfg = _empty_configuration()
    loader = InClusterConfigLoader(
        token_filename=str(sa_dir / "token"),
        cert_filename=str(sa_dir / "ca.crt"),
        environ=env,
    )
    try:
        loader.load_and_set(cfg)
    except ConfigException as exc:
        raise ConfigurationError(f"In-cluster configuration unavailable: {exc}") from exc

    namespace = None
    namespace_path = sa_dir / "namespace"
    if namespace_path.exists():
        namespace = namespace_path.read_text(encoding="utf-8").strip() or None
    return _to_rest_config(cfg, namespace)


def load_rest_config(environ: dict[str, str] | None = None) -> RestConfig:
    """Use ``$KUBECONFIG`` when set, otherwise the in-cluster configuration."""

    env = os.environ if environ is None else environ
    kubeconfig = env.get("KUBECONFIG")
    if kubeconfig:
        logger.debug("Loading kubeconfig from %s", kubeconfig)
        return load_kubeconfig(kubeconfig)
    logger.debug("KUBECONFIG unset; using in-cluster configuration")
    return in_cluster_config(env)
