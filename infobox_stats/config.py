"""Per-language configuration for the mapping statistics build."""

from dataclasses import dataclass, replace

# Localized names of the Template namespace, keyed by wiki language code.
TEMPLATE_NAMESPACES: dict[str, str] = {
    "ar": "قالب:",
    "ca": "Plantilla:",
    "cs": "Šablona:",
    "de": "Vorlage:",
    "es": "Plantilla:",
    "fr": "Modèle:",
    "hu": "Sablon:",
    "nl": "Sjabloon:",
    "pl": "Szablon:",
    "pt": "Predefinição:",
    "ru": "Шаблон:",
    "sv": "Mall:",
    "tr": "Şablon:",
}
DEFAULT_TEMPLATE_NAMESPACE = "Template:"


@dataclass(frozen=True)
class StatsConfig:
    """Language code, template namespace and URI prefixes for one build."""

    language: str
    template_namespace: str
    resource_uri_prefix: str
    property_uri_prefix: str

    @classmethod
    def for_language(cls, language: str, template_namespace: str | None = None) -> "StatsConfig":
        """Derive the DBpedia URI prefixes and template namespace for a language.

        Args:
            language: Wiki language code, e.g. "en" or "de"
            template_namespace: Override for the localized namespace name

        Returns:
            StatsConfig for that language
        """
        host = "dbpedia.org" if language == "en" else f"{language}.dbpedia.org"
        if template_namespace is None:
            template_namespace = TEMPLATE_NAMESPACES.get(language, DEFAULT_TEMPLATE_NAMESPACE)
        return cls(
            language=language,
            template_namespace=template_namespace,
            resource_uri_prefix=f"http://{host}/resource/",
            property_uri_prefix=f"http://{host}/property/",
        )

    def with_overrides(self, **overrides: str | None) -> "StatsConfig":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
