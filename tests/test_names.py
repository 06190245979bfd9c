"""Tests for name cleaning and normalization."""

import pytest

from infobox_stats.config import StatsConfig
from infobox_stats.names import (
    NameCleaner,
    UnrecognizedUriError,
    clean_value,
    good_name,
    normalize,
    wiki_decode,
)


@pytest.fixture
def cleaner(config):
    return NameCleaner(config)


class TestWikiDecode:
    def test_underscores_become_spaces(self):
        assert wiki_decode("Template:Infobox_settlement") == "Template:Infobox settlement"

    def test_percent_escapes_decoded(self):
        assert wiki_decode("Mod%C3%A8le:Infobox_%22X%22") == 'Modèle:Infobox "X"'

    def test_whitespace_collapsed_and_trimmed(self):
        assert wiki_decode("_Infobox__Foo_") == "Infobox Foo"


class TestNameCleaner:
    def test_resource_prefix_stripped(self, cleaner):
        assert cleaner.strip_uri("http://dbpedia.org/resource/Template:Foo") == "Template:Foo"

    def test_property_prefix_stripped(self, cleaner):
        assert cleaner.strip_uri("http://dbpedia.org/property/birthDate") == "birthDate"

    def test_english_property_prefix_accepted_for_other_languages(self):
        cleaner = NameCleaner(StatsConfig.for_language("de"))

        assert cleaner.strip_uri("http://de.dbpedia.org/resource/Berlin") == "Berlin"
        assert cleaner.strip_uri("http://dbpedia.org/property/name") == "name"

    def test_unrecognized_uri(self, cleaner):
        with pytest.raises(UnrecognizedUriError) as excinfo:
            cleaner.strip_uri("http://example.org/Foo")

        assert excinfo.value.uri == "http://example.org/Foo"
        assert "Unrecognized URI" in str(excinfo.value)

    def test_clean_uri_unescapes_before_stripping(self, cleaner):
        uri = r"http://dbpedia.org/resource/Template:Caf\u00e9"

        assert cleaner.clean_uri(uri) == "Template:Café"


class TestValues:
    def test_clean_value_unescapes_and_removes_line_breaks(self):
        assert clean_value(r"first\r\nsecond \"quoted\"") == 'firstsecond "quoted"'

    @pytest.mark.parametrize("name", ["a<b", "a>b", "{{a", "a|b", "a}"])
    def test_bad_names(self, name):
        assert not good_name(name)

    @pytest.mark.parametrize("name", ["birth_date", "Template:Infobox person", "(a) [b]"])
    def test_good_names(self, name):
        assert good_name(name)

    def test_normalize(self):
        assert normalize(" birth_date ") == "birthdate"
        assert normalize("birth date") == "birth date"


class TestStatsConfig:
    def test_english(self):
        config = StatsConfig.for_language("en")

        assert config.template_namespace == "Template:"
        assert config.resource_uri_prefix == "http://dbpedia.org/resource/"
        assert config.property_uri_prefix == "http://dbpedia.org/property/"

    def test_localized(self):
        config = StatsConfig.for_language("de")

        assert config.template_namespace == "Vorlage:"
        assert config.resource_uri_prefix == "http://de.dbpedia.org/resource/"
        assert config.property_uri_prefix == "http://de.dbpedia.org/property/"

    def test_unknown_language_uses_template(self):
        assert StatsConfig.for_language("xx").template_namespace == "Template:"

    def test_overrides(self):
        config = StatsConfig.for_language("en", "Tpl:").with_overrides(
            resource_uri_prefix="http://example.org/r/", property_uri_prefix=None
        )

        assert config.template_namespace == "Tpl:"
        assert config.resource_uri_prefix == "http://example.org/r/"
        assert config.property_uri_prefix == "http://dbpedia.org/property/"
