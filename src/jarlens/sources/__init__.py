"""Source recovery providers, tried in order by the class detail extractor."""

from jarlens.config import Config
from jarlens.protocols import SourceProvider
from jarlens.sources.decompiler import DecompilerProvider
from jarlens.sources.disassembly import DisassemblyProvider
from jarlens.sources.sources_jar import SourcesJarProvider


def default_providers(config: Config) -> list[SourceProvider]:
    """Build the provider chain enabled by the configuration.

    The sources jar is always consulted first. The decompiler needs a
    Fernflower jar and the disassembly fallback needs a javap path; either
    is left out of the chain when not configured.
    """
    providers: list[SourceProvider] = [SourcesJarProvider()]
    if config.fernflower_path:
        providers.append(
            DecompilerProvider(config.fernflower_path, config.java_path, config.tool_timeout)
        )
    if config.javap_path:
        providers.append(DisassemblyProvider(config.javap_path, config.tool_timeout))
    return providers


__all__ = [
    "DecompilerProvider",
    "DisassemblyProvider",
    "SourcesJarProvider",
    "default_providers",
]
