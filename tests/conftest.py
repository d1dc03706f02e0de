"""
Shared fixtures: small in-memory catalogs built with RegistryBuilder.
"""
import json

import pytest

from font_tagger.registry import RegistryBuilder
from font_tagger.store import TaggingStore

TAG_DEFINITIONS = {
    "/Expressive/Loud": {
        "description": "Attention grabbing",
        "superShortDescription": "Loud",
        "related": ["/Expressive/Calm"],
    },
    "/Expressive/Calm": {
        "description": "Quiet texture",
        "superShortDescription": "Calm",
        "related": [],
    },
    "/Purpose/Easy Reading": {
        "description": "Comfortable for body text",
        "superShortDescription": "Readable",
        "related": [],
    },
    "/Sans/Geometric": {"description": "Circles and lines"},
}

TAGS_METADATA = """\
# name,lowScore,highScore,description
/Expressive/Loud,0,100
/Purpose/Easy Reading,0,100,"Suitable for long texts, such as books"
/Quality/Drawing,0,100,"Craft of the outlines"
"""

FAMILY_DATA = {
    "familyMetadataList": [
        {"family": "Roboto", "axes": [{"tag": "wght", "min": 100, "max": 900, "defaultValue": 400}]},
        {
            "family": "Roboto Flex",
            "axes": [
                {"tag": "wght", "min": 100, "max": 1000, "defaultValue": 400},
                {"tag": "wdth", "min": 25, "max": 151, "defaultValue": 100},
            ],
        },
        {"family": "Lato", "axes": []},
        {"family": "Comic Sans MS", "axes": []},
        {"family": "Montserrat", "axes": []},
    ]
}

EMBEDDINGS = {
    "Roboto": [0.0, 0.0, 0.0],
    "Roboto Flex": [0.0, 0.0, 1.0],
    "Lato": [0.0, 0.0, 0.5],
    "Comic Sans MS": [3.0, 4.0],
}

TAG_RULES = """\
# rule,severity,description
tags["/Expressive/Loud"] > 50 and family == "Roboto",WARN,"Roboto should not be loud"
family in ["Comic Sans MS", "Papyrus"],INFO,"Novelty family"
"""


def build_registries(rules: str = TAG_RULES):
    return (
        RegistryBuilder()
        .with_tag_definitions(json.dumps(TAG_DEFINITIONS))
        .with_tag_metadata(TAGS_METADATA)
        .with_family_data(json.dumps(FAMILY_DATA))
        .with_embeddings(json.dumps(EMBEDDINGS))
        .with_rules(rules)
        .build()
    )


@pytest.fixture
def registries():
    return build_registries()


@pytest.fixture
def store(registries):
    return TaggingStore(registries)


@pytest.fixture
def data_dir(tmp_path):
    """A data directory holding every reference file plus a tagging CSV."""
    (tmp_path / "tag_definitions.json").write_text(json.dumps(TAG_DEFINITIONS), encoding="utf-8")
    (tmp_path / "tags_metadata.csv").write_text(TAGS_METADATA, encoding="utf-8")
    (tmp_path / "family_data.json").write_text(json.dumps(FAMILY_DATA), encoding="utf-8")
    (tmp_path / "embeddings.json").write_text(json.dumps(EMBEDDINGS), encoding="utf-8")
    (tmp_path / "tag_rules.csv").write_text(TAG_RULES, encoding="utf-8")
    (tmp_path / "taggings.csv").write_text(
        "Roboto,,/Expressive/Loud,90\n"
        "Lato,,/Purpose/Easy Reading,75\n"
        'Roboto Flex,"wght,wdth@400,100",/Expressive/Loud,30\n',
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture
def make_registries():
    return build_registries
