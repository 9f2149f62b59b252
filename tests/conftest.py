import json

import pytest
from fastapi.testclient import TestClient

from office.lectionary_engine import FileTableLoader, LectionaryResolver
from office.main import app


def ref(book, start_chapter, end_chapter=None, start_verse=None, end_verse=None):
    return {
        "book": book,
        "startChapter": start_chapter,
        "startVerse": start_verse,
        "endChapter": end_chapter or start_chapter,
        "endVerse": end_verse,
    }


CIVIL_TABLE = {
    "_source": "fixture",
    "10-19": {
        "morning": {"first": [ref("Jeremiah", 5)], "second": [ref("Luke", 1, start_verse=1, end_verse=25)]},
        "evening": {"first": [ref("Jeremiah", 6)], "second": [ref("Romans", 5)]},
    },
    "02-29": {
        "morning": {"first": [ref("Exodus", 20)], "second": []},
        "evening": {"first": [], "second": []},
    },
    "10-20": {"morning": "not an entry"},
}

REVISED_TABLE = {
    "regular": {
        "trinity20": {
            "dayLabel": "Twentieth Sunday after Trinity",
            "morning": {
                "first": {"primary": [ref("Ezekiel", 34)], "alternative": [ref("Hosea", 14)]},
                "second": {"primary": [ref("Matthew", 22, start_verse=1, end_verse=14)]},
            },
            "evening": {
                "first": [ref("Ezekiel", 37)],
                "second": [ref("Ephesians", 5, start_verse=15, end_verse=33)],
            },
        },
        "trinity20-monday": {
            "morning": {"first": [ref("Ecclesiasticus", 1)], "second": [ref("Mark", 1)]},
        },
        "easterday": {
            "morning": {"first": [ref("Exodus", 12)], "second": [ref("Revelation", 1, start_verse=4, end_verse=18)]},
            "evening": {"first": [ref("Exodus", 14)], "second": [ref("John", 20, start_verse=11, end_verse=23)]},
        },
    },
    "fixed": {
        "michaelmas": {
            "name": "St Michael and All Angels",
            "firstEvensong": {"first": [ref("Genesis", 32)], "second": [ref("Acts", 12)]},
            "mattins": {"first": [ref("Genesis", 28, start_verse=10, end_verse=17)], "second": [ref("Acts", 12, start_verse=5, end_verse=11)]},
            "secondEvensong": {"first": [ref("Daniel", 10, start_verse=4)], "second": [ref("Jude", 1, start_verse=5, end_verse=9)]},
        },
    },
}

MCHEYNE_TABLE = [
    {"day": 1, "morning": [ref("Genesis", 1), ref("Matthew", 1)], "evening": [ref("Ezra", 1), ref("Acts", 1)]},
    {"day": 60, "morning": [ref("Genesis", 50), ref("Mark", 2)], "evening": [ref("Esther", 5), ref("Romans", 1)]},
    {"day": 365, "morning": [ref("Deuteronomy", 34), ref("Psalms", 148)], "evening": [ref("Malachi", 4), ref("Revelation", 22)]},
    {"section": "no day number"},
]

BIBLEPROJECT_TABLE = [
    {"day": 1, "section": "Genesis", "reading": [ref("Genesis", 1, 2)], "psalm": ref("Psalms", 1)},
    {"day": 2, "section": "Genesis", "reading": [ref("Genesis", 3)]},
]

TABLES = {
    "1662-original.json": CIVIL_TABLE,
    "1662-revised.json": REVISED_TABLE,
    "mcheyne.json": MCHEYNE_TABLE,
    "bibleproject.json": BIBLEPROJECT_TABLE,
}


@pytest.fixture()
def table_dir(tmp_path):
    for name, table in TABLES.items():
        (tmp_path / name).write_text(json.dumps(table), encoding="utf-8")
    return tmp_path


@pytest.fixture()
def resolver(table_dir):
    return LectionaryResolver(loader=FileTableLoader(table_dir))


@pytest.fixture()
def client(table_dir):
    with TestClient(app) as c:
        app.state.resolver = LectionaryResolver(loader=FileTableLoader(table_dir))
        yield c
