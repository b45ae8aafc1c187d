"""
Search indexing package.

This package builds the index consumed by the client-side search runtime:
- analyzers: Tokenizer, stopword filter, and stemmer
- inverted_index: Per-field character trie with postings
- document_store: Stored fields and per-field token counts
- search_index: Orchestrates analysis and serializes the index
- builder: Turns a book into indexed documents plus result URLs
- embed: Writes the bundle into searchindex.js
"""
