"""
Text feature extraction.

This subpackage includes:
- tokenization and stopword removal for review text
- per-document term counting and vocabulary selection
- tf-idf weighting and the document-term matrix builder.
"""
