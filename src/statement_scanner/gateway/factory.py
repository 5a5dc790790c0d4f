import importlib
from typing import Any, Dict, Optional, Type

from statement_scanner.config.settings import ConfigLoader
from statement_scanner.gateway.base import ExtractionGateway


class GatewayFactory:
    """
    Factory for creating extraction gateways.

    Uses a registry pattern to map provider identifiers to gateway classes
    and their constructor options.
    """

    _locked = False
    _registry: Dict[str, Type[ExtractionGateway]] = {}
    _options: Dict[str, Dict[str, Any]] = {}
    _default: Optional[str] = None

    @classmethod
    def register(
        cls,
        provider: str,
        gateway_class: Type[ExtractionGateway],
        options: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Register a gateway for a provider.

        Args:
            provider: Unique identifier for the provider (e.g, 'openai')
            gateway_class: The gateway class
            options: Keyword arguments passed to the class on creation

        Raises:
            ValueError: If the provider is already registered
            TypeError: If gateway_class doesn't inherit from ExtractionGateway
            RuntimeError: If the registry is locked

        Example:
            GatewayFactory.register('openai', OpenAIExtractionGateway, {"model": "gpt-4.1"})
        """
        if cls._locked:
            raise RuntimeError("Registry is locked, cannot add more gateways")

        if provider in cls._registry:
            raise ValueError(f"Gateway for '{provider}' is already registered")

        if not isinstance(gateway_class, type) or not issubclass(gateway_class, ExtractionGateway):
            raise TypeError(f"{gateway_class} must inherit from ExtractionGateway")

        cls._registry[provider] = gateway_class
        cls._options[provider] = dict(options or {})
        if cls._default is None:
            cls._default = provider

    @classmethod
    def lock_registry(cls):
        """Prevent further registration (call after app initialization)"""
        cls._locked = True

    @classmethod
    def reset(cls):
        """Empty and unlock the registry"""
        cls._registry = {}
        cls._options = {}
        cls._default = None
        cls._locked = False

    @classmethod
    def create_gateway(cls, provider: Optional[str] = None, **overrides: Any) -> ExtractionGateway:
        """
        Create a gateway instance.

        Args:
            provider: Provider identifier. Defaults to the configured default.
            overrides: Options that replace the registered ones

        Raises:
            ValueError: If no gateway is registered for this provider
        """
        provider = provider or cls._default
        if provider not in cls._registry:
            available = ', '.join(cls._registry.keys())
            raise ValueError(
                f"No gateway registered for '{provider}'. "
                f"Available gateways: {available}"
            )

        options = {**cls._options[provider], **overrides}
        return cls._registry[provider](**options)

    @classmethod
    def get_available_providers(cls) -> list[str]:
        return list(cls._registry.keys())

    @classmethod
    def load_gateways_from_config(
        cls,
        config: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Load and register gateways from configuration, then lock the registry.

        Args:
            config: Optional config dict. If None, loads from ConfigLoader.

            Example (testing):
                test_config = {"gateways": [...]}
                GatewayFactory.load_gateways_from_config(config=test_config)
        """
        if config is None:
            config = ConfigLoader.load_gateways_config()

        for gateway_config in config['gateways']:
            module_path, class_name = str(gateway_config['class']).rsplit('.', 1)
            module = importlib.import_module(module_path)
            gateway_class = getattr(module, class_name)

            cls.register(
                gateway_config['provider'],
                gateway_class,
                gateway_config.get('options'),
            )

        if config.get('default'):
            cls._default = config['default']

        cls.lock_registry()
