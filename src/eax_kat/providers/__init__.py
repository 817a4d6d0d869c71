"""AES-EAX providers bundled with the harness."""

from .narrow_counter import NarrowCtr32Eax, NarrowCtr64Eax
from .pycryptodome_eax import PyCryptodomeEax
from .reference_eax import ReferenceEax, StrictReferenceEax

# Registry of available providers
PROVIDERS: dict[str, type] = {
    "reference_eax": ReferenceEax,
    "reference_eax_strict": StrictReferenceEax,
    "pycryptodome_eax": PyCryptodomeEax,
    "narrow_ctr32_eax": NarrowCtr32Eax,
    "narrow_ctr64_eax": NarrowCtr64Eax,
}

# Providers expected to conform; the narrow-counter ones are known bad
CONFORMING_PROVIDERS = ("reference_eax", "reference_eax_strict", "pycryptodome_eax")


def get_provider(name: str) -> type:
    """Get provider class by name.

    Args:
        name: Provider name

    Returns:
        Provider class

    Raises:
        KeyError: If provider not found
    """
    if name not in PROVIDERS:
        available = ", ".join(PROVIDERS.keys())
        raise KeyError(f"Unknown provider '{name}'. Available: {available}")
    return PROVIDERS[name]


def list_providers() -> list[dict[str, str]]:
    """List all available providers with descriptions.

    Returns:
        List of dicts with 'name' and 'description' keys
    """
    result = []
    for name, cls in PROVIDERS.items():
        result.append({
            "name": name,
            "description": getattr(cls, "description", "No description"),
        })
    return result


__all__ = [
    "PROVIDERS",
    "CONFORMING_PROVIDERS",
    "get_provider",
    "list_providers",
    "ReferenceEax",
    "StrictReferenceEax",
    "PyCryptodomeEax",
    "NarrowCtr32Eax",
    "NarrowCtr64Eax",
]
