"""
Elasticsearch request bodies for the translations collections.
"""

from typing import List

from core.tm.models import BulkAction, BulkOperation

# Boosts for the three fuzzy strategies, highest first
PHRASE_BOOST = 5
ALL_TERMS_BOOST = 3
FUZZY_BOOST = 1

INDEX_BODY = {
    "settings": {
        "index": {
            "max_ngram_diff": 8,
        },
        "analysis": {
            "normalizer": {
                "lowercase_normalizer": {
                    "type": "custom",
                    "filter": ["lowercase"],
                },
            },
            "tokenizer": {
                "ngram_tokenizer": {
                    "type": "ngram",
                    "min_gram": 3,
                    "max_gram": 5,
                    "token_chars": ["letter", "digit", "whitespace"],
                },
            },
            "analyzer": {
                "ngram_analyzer": {
                    "type": "custom",
                    "tokenizer": "ngram_tokenizer",
                    "filter": ["lowercase"],
                },
            },
        },
    },
    "mappings": {
        "properties": {
            "source_text": {
                "type": "text",
                "analyzer": "ngram_analyzer",
                "search_analyzer": "standard",
                "fields": {
                    "dedup": {
                        "type": "keyword",
                        "normalizer": "lowercase_normalizer",
                    },
                },
            },
            "translated_text": {"type": "text", "analyzer": "standard"},
            "source_lang": {"type": "keyword"},
            "target_lang": {"type": "keyword"},
        },
    },
}


def _pair_filter(source_lang: str, target_lang: str) -> List[dict]:
    return [
        {"term": {"source_lang": source_lang}},
        {"term": {"target_lang": target_lang}},
    ]


def build_exact_query(source_lang: str, target_lang: str, source_text: str) -> dict:
    """Pair filter plus lowercase keyword equality on source_text.dedup."""
    return {
        "size": 1,
        "query": {
            "bool": {
                "must": _pair_filter(source_lang, target_lang) + [
                    {"term": {"source_text.dedup": source_text.lower()}},
                ],
            },
        },
    }


def build_fuzzy_query(source_lang: str, target_lang: str, source_text: str) -> dict:
    """
    Pair filter plus a ranked disjunction: exact phrase, all terms,
    edit-distance tolerant terms. At least one strategy must match.
    """
    return {
        "size": 1,
        "query": {
            "bool": {
                "must": _pair_filter(source_lang, target_lang),
                "should": [
                    {
                        "match_phrase": {
                            "source_text": {
                                "query": source_text,
                                "boost": PHRASE_BOOST,
                            },
                        },
                    },
                    {
                        "match": {
                            "source_text": {
                                "query": source_text,
                                "operator": "and",
                                "boost": ALL_TERMS_BOOST,
                            },
                        },
                    },
                    {
                        "match": {
                            "source_text": {
                                "query": source_text,
                                "fuzziness": "AUTO",
                                "boost": FUZZY_BOOST,
                            },
                        },
                    },
                ],
                "minimum_should_match": 1,
            },
        },
    }


def build_bulk_lines(index: str, operations: List[BulkOperation]) -> List[dict]:
    """Action/source line pairs for the _bulk endpoint, in operation order."""
    lines = []
    for op in operations:
        if op.action == BulkAction.UPDATE:
            lines.append({"update": {"_index": index, "_id": op.id}})
            lines.append({"doc": {"translated_text": op.translated_text}})
        else:
            lines.append({"index": {"_index": index}})
            lines.append({
                "source_lang": op.source_lang,
                "target_lang": op.target_lang,
                "source_text": op.source_text,
                "translated_text": op.translated_text,
            })
    return lines
