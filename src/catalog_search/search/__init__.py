"""
Catalog search algorithms.

This package provides the pure-Python building blocks of the query pipeline:
- trie: frequency-weighted prefix tree for autocomplete
- inverted_index: normalized token -> item identifiers
- boyer_moore: Unicode-safe substring search and overlap counting
- fuzzy: Levenshtein distance and spelling corrections
- relevance: static per-item ranking score
- store_ranker: keyword occurrence ranking of stores
- pagination: page slicing
- snapshot: the immutable bundle published on every reload
"""
