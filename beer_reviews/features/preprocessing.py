"""
Text preprocessing utilities for review text.

This module turns raw reviews into a stream of (document id, token)
pairs:

- lowercasing
- punctuation removal (apostrophes inside words are kept)
- optional number removal
- whitespace tokenization into unigrams
- stopword removal
- optional stemming

Every function works lazily on iterables of pairs, so one document's
tokens never need to be held next to another's. Stopword sets are built
once by the caller and passed in; nothing here keeps global state.
"""

from __future__ import annotations

import logging
import re
import string
import unicodedata
from typing import Hashable, Iterable, Iterator, Optional, Set, Tuple

from nltk.corpus import stopwords as nltk_stopwords
from nltk.stem import PorterStemmer, SnowballStemmer
from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS as SKLEARN_EN_STOPWORDS


logger = logging.getLogger(__name__)

DocId = Hashable
TokenPair = Tuple[DocId, str]

# Right single quotes and modifier apostrophes are read as "'".
_APOSTROPHE_TABLE = str.maketrans({"\u2019": "'", "\u02bc": "'"})
_NUMBER_RE = re.compile(r"\d+")


def _is_punctuation(ch: str) -> bool:
    """
    True for ASCII punctuation and any Unicode punctuation (dashes,
    ellipses, curly quotes, ...), but never for the apostrophe.
    """
    if ch == "'":
        return False
    return ch in string.punctuation or unicodedata.category(ch).startswith("P")


def strip_punctuation(text: str) -> str:
    """
    Replace every punctuation character except the apostrophe with a space.
    """
    text = text.translate(_APOSTROPHE_TABLE)
    return "".join(" " if _is_punctuation(ch) else ch for ch in text)


# ---------------------------------------------------------------------------
# Basic text cleaning
# ---------------------------------------------------------------------------


def clean_text(
    text: str,
    lowercase: bool = True,
    remove_numbers: bool = False,
) -> str:
    """
    Apply basic normalization to a raw review string.

    Parameters
    ----------
    text : str
        Raw input text.
    lowercase : bool
        Convert text to lowercase if True.
    remove_numbers : bool
        Remove numeric characters if True.

    Returns
    -------
    str
        Cleaned text with single spaces between words.
    """
    if not isinstance(text, str):
        text = str(text)

    if lowercase:
        text = text.lower()

    # Replace punctuation with space so we don't accidentally join words.
    text = strip_punctuation(text)

    if remove_numbers:
        text = _NUMBER_RE.sub(" ", text)

    return re.sub(r"\s+", " ", text).strip()


# ---------------------------------------------------------------------------
# Tokenization
# ---------------------------------------------------------------------------


def tokenize_text(text: str) -> Iterator[str]:
    """
    Split a cleaned string into unigram tokens.

    Apostrophes are only kept inside a word: "'hoppy'" becomes "hoppy"
    but "don't" stays intact.
    """
    for raw in text.split():
        token = raw.strip("'")
        if token:
            yield token


def tokenize_documents(
    documents: Iterable[Tuple[DocId, str]],
    lowercase: bool = True,
    remove_numbers: bool = False,
) -> Iterator[TokenPair]:
    """
    Lazily tokenize a collection of documents.

    Parameters
    ----------
    documents : Iterable[Tuple[DocId, str]]
        (document id, raw text) pairs.
    lowercase : bool
        Lowercase the text before tokenizing.
    remove_numbers : bool
        Drop digits before tokenizing.

    Yields
    ------
    Tuple[DocId, str]
        One (document id, token) pair per token occurrence.
    """
    for doc_id, text in documents:
        cleaned = clean_text(text, lowercase=lowercase, remove_numbers=remove_numbers)
        for token in tokenize_text(cleaned):
            yield doc_id, token


# ---------------------------------------------------------------------------
# Stopwords
# ---------------------------------------------------------------------------


def _nltk_stopwords(language: str) -> Set[str]:
    try:
        return set(nltk_stopwords.words(language))
    except LookupError:
        # The corpus has to be fetched once with nltk.download("stopwords").
        logger.warning(
            "NLTK stopwords corpus for %r is not installed; run "
            "nltk.download('stopwords'). Using scikit-learn's list only.",
            language,
        )
        return set()


def get_stopword_set(
    source: str = "sklearn",
    language: str = "english",
    extra_words: Optional[Iterable[str]] = None,
) -> Set[str]:
    """
    Build the fixed stopword set for a run.

    Parameters
    ----------
    source : str
        "sklearn" (scikit-learn's English list), "nltk" (NLTK corpus), or
        "both" (their union).
    language : str
        Language for the NLTK corpus.
    extra_words : Optional[Iterable[str]]
        Additional words to exclude, lowercased before use.

    Returns
    -------
    Set[str]
        Set of stopwords.
    """
    src = (source or "sklearn").lower()
    if src not in {"sklearn", "nltk", "both"}:
        raise ValueError(f"Unknown stopword source: {source!r}")

    words: Set[str] = set()
    if src in {"sklearn", "both"}:
        words |= set(SKLEARN_EN_STOPWORDS)
    if src in {"nltk", "both"}:
        nltk_words = _nltk_stopwords(language)
        if not nltk_words and src == "nltk":
            nltk_words = set(SKLEARN_EN_STOPWORDS)
        words |= nltk_words

    if extra_words:
        words |= {w.lower() for w in extra_words}

    return words


def remove_stopwords(
    tokens: Iterable[TokenPair],
    stopword_set: Set[str],
) -> Iterator[TokenPair]:
    """
    Drop (document id, token) pairs whose token is a stopword.

    Applying this twice gives the same stream as applying it once.
    """
    for doc_id, token in tokens:
        if token not in stopword_set:
            yield doc_id, token


# ---------------------------------------------------------------------------
# Stemming
# ---------------------------------------------------------------------------


def _build_stemmer(algorithm: str = "porter"):
    """
    Build a stemming object based on the chosen algorithm.

    Parameters
    ----------
    algorithm : str
        Name of the stemming algorithm: "porter" or "snowball".

    Returns
    -------
    object
        Stemmer object with a .stem(token) method.
    """
    algo = (algorithm or "porter").lower()
    if algo == "porter":
        return PorterStemmer()
    if algo == "snowball":
        return SnowballStemmer("english")
    raise ValueError(f"Unknown stemming algorithm: {algorithm!r}")


def stem_tokens(
    tokens: Iterable[TokenPair],
    algorithm: str = "porter",
) -> Iterator[TokenPair]:
    """
    Stem the token of every (document id, token) pair.
    """
    stemmer = _build_stemmer(algorithm)
    for doc_id, token in tokens:
        yield doc_id, stemmer.stem(token)


# ---------------------------------------------------------------------------
# High-level preprocessing
# ---------------------------------------------------------------------------


def preprocess_documents(
    documents: Iterable[Tuple[DocId, str]],
    stopword_set: Set[str],
    lowercase: bool = True,
    remove_numbers: bool = False,
    stemming: Optional[str] = None,
) -> Iterator[TokenPair]:
    """
    Full preprocessing: tokenize, drop stopwords, optionally stem.

    Stopwords are removed before stemming, so the stopword list is matched
    against surface forms.

    Parameters
    ----------
    documents : Iterable[Tuple[DocId, str]]
        (document id, raw text) pairs.
    stopword_set : Set[str]
        Words to exclude.
    lowercase : bool
        Lowercase the text before tokenizing.
    remove_numbers : bool
        Drop digits before tokenizing.
    stemming : Optional[str]
        Stemming algorithm ("porter" or "snowball"), or None to skip.

    Returns
    -------
    Iterator[TokenPair]
        Filtered (document id, token) stream.
    """
    stream = tokenize_documents(
        documents, lowercase=lowercase, remove_numbers=remove_numbers
    )
    stream = remove_stopwords(stream, stopword_set)
    if stemming:
        stream = stem_tokens(stream, algorithm=stemming)
    return stream
