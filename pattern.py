#!/usr/bin/env python3
"""
Pattern matching and extraction for Media Organizer
Provides the filename classifier: extension/year/episode detection, tag
stripping, series-name token walking and the aggressive cleaner used to build
metadata search queries.
"""

import re
from typing import Callable, List, Optional, Tuple

from model import MediaType, ParsedMedia
from tags import (
    QUALITY_TAGS, RELEASE_GROUP_REGEXES, RELEASE_GROUP_SET, SEARCH_JUNK_REGEXES, VIDEO_EXTENSIONS
)


EXTENSION_PATTERN = re.compile(r'\.[a-zA-Z0-9]{2,4}$')
YEAR_PATTERN = re.compile(r'(?<!\d)\(?(19[5-9]\d|20[0-2]\d)\)?(?!\d)')


def _season_episode(match: re.Match) -> Tuple[int, int]:
    return int(match.group(1)), int(match.group(2))


def _episode_only(match: re.Match) -> Tuple[int, int]:
    return 1, int(match.group(1))


# Ordered rule table: first match wins.
# Format: (pattern, extractor returning (season, episode), description)
TV_PATTERNS: List[Tuple[re.Pattern, Callable[[re.Match], Tuple[int, int]], str]] = [
    (re.compile(r'[Ss](\d{1,2})[Ee](\d{1,3})'), _season_episode, 'S01E01'),
    (re.compile(r'(?<!\d)(\d{1,2})[xX](\d{1,3})(?!\d)'), _season_episode, '1x01'),
    (re.compile(r'season\s*(\d{1,2})\s*episode\s*(\d{1,3})', re.IGNORECASE), _season_episode, 'Season 1 Episode 1'),
    (re.compile(r'[Ss](\d{1,2})\s+[Ee](\d{1,3})'), _season_episode, 'S01 E01'),
    (re.compile(r'(?<![A-Za-z0-9])[Ee][Pp]?(\d{1,3})(?!\d)'), _episode_only, 'EP01 / E01 (season 1)'),
]

# Tokens that mark where a series title ends
SEASON_EPISODE_TOKEN_PATTERNS = [
    re.compile(r'^s\d{1,2}e\d{1,3}$', re.IGNORECASE),
    re.compile(r'^s\d{1,2}$', re.IGNORECASE),
    re.compile(r'^\d{1,2}x\d{1,3}$', re.IGNORECASE),
    re.compile(r'^e[p]?\d{1,3}$', re.IGNORECASE),
    re.compile(r'^(?:season|episode)$', re.IGNORECASE),
]


def get_extension(filename: str) -> str:
    """Return the lowercased extension including the dot, or '' if none"""
    match = EXTENSION_PATTERN.search(filename)
    return match.group(0).lower() if match else ""


def strip_extension(filename: str) -> str:
    return EXTENSION_PATTERN.sub('', filename)


def is_video_file(filename: str) -> bool:
    return get_extension(filename) in VIDEO_EXTENSIONS


def clean_filename(filename: str) -> str:
    """Remove extension, brackets, tags and stray indices from a filename.

    Parenthesized content survives only when it is a bare year, so
    ``clean_filename(clean_filename(x)) == clean_filename(x)``.
    """
    cleaned = strip_extension(filename)

    cleaned = re.sub(r'[._]', ' ', cleaned)
    cleaned = re.sub(r'\[.*?\]', ' ', cleaned)
    cleaned = re.sub(r'\((?!(?:19|20)\d{2}\))[^)]*\)', ' ', cleaned)

    for regex in RELEASE_GROUP_REGEXES:
        cleaned = regex.sub(' ', cleaned)

    # Standalone file indices ("01", "001") unless they lead into an episode marker
    cleaned = re.sub(r'\b\d{1,3}\b(?!\s*(?:x|e|episode|season|s\d))', ' ', cleaned, flags=re.IGNORECASE)

    cleaned = re.sub(r'\s+', ' ', cleaned)
    return cleaned.strip()


def extract_year(filename: str) -> Optional[int]:
    """Return the first 1950-2029 year token, parenthesized or not"""
    match = YEAR_PATTERN.search(filename)
    if match:
        return int(match.group(1))
    return None


def detect_tv_pattern(filename: str) -> Optional[Tuple[int, int]]:
    """Return (season, episode) from the first matching TV rule, else None"""
    for pattern, extractor, _description in TV_PATTERNS:
        match = pattern.search(filename)
        if match:
            return extractor(match)
    return None


def tokenize_filename(filename: str) -> List[str]:
    name = strip_extension(filename)
    name = re.sub(r'[._\-\[\]()]', ' ', name)
    return [token for token in name.split() if token]


def normalize_token(token: str) -> str:
    return re.sub(r'[.\-]', '', token.lower())


def is_quality_tag(token: str) -> bool:
    return normalize_token(token) in QUALITY_TAGS


def is_tag(token: str) -> bool:
    """True for quality tags and release groups from the tag dictionary"""
    return is_quality_tag(token) or token.lower() in RELEASE_GROUP_SET or normalize_token(token) in RELEASE_GROUP_SET


def is_season_episode_token(token: str) -> bool:
    return any(pattern.match(token) for pattern in SEASON_EPISODE_TOKEN_PATTERNS)


def extract_series_tokens(tokens: List[str]) -> List[str]:
    """Walk tokens left to right and keep the series title prefix.

    Tags seen before any title word are skipped (filenames that lead with a
    release tag); after that, a tag, a marker, a year or a bare 1-3 digit
    number ends the title.
    """
    result = []
    has_title_word = False

    for token in tokens:
        is_numeric = token.isdigit()

        if is_season_episode_token(token):
            break

        if is_tag(token):
            if not has_title_word:
                continue
            break

        if has_title_word and re.fullmatch(r'(?:19|20)\d{2}', token):
            break

        # Stray episode index after the title ("Show 05 720p")
        if has_title_word and is_numeric and len(token) <= 3:
            break

        if not is_numeric:
            has_title_word = True
        result.append(token)

    return result


def capitalize_token(token: str) -> str:
    return token[:1].upper() + token[1:].lower()


def extract_series_name(filename: str) -> str:
    """Series name for a single file, title-cased; falls back to the cleaned name"""
    series_tokens = extract_series_tokens(tokenize_filename(filename))
    if series_tokens:
        return ' '.join(capitalize_token(token) for token in series_tokens)
    return clean_filename(filename)


def title_case(text: str) -> str:
    """Capitalize the first letter of every word, leave the rest untouched"""
    return re.sub(r'\b\w', lambda m: m.group(0).upper(), text)


def classify(filename: str) -> ParsedMedia:
    """Parse a media filename into a ParsedMedia record.

    Never raises for odd input: anything without a TV pattern or a year
    becomes ``unknown`` with the generically cleaned name.
    """
    extension = get_extension(filename)
    cleaned_name = clean_filename(filename)
    year = extract_year(filename)
    tv_pattern = detect_tv_pattern(filename)

    detected_type = MediaType.UNKNOWN
    detected_name = cleaned_name
    confidence = 50

    if tv_pattern:
        detected_type = MediaType.TVSHOW
        confidence = 80
        detected_name = extract_series_name(filename)
    elif year:
        detected_type = MediaType.MOVIE
        confidence = 70
        year_index = filename.find(str(year))
        if year_index > 0:
            detected_name = clean_filename(filename[:year_index].rstrip(' ._-(['))

    if 3 < len(detected_name) < 100:
        confidence += 10

    season, episode = tv_pattern if tv_pattern else (None, None)

    return ParsedMedia(
        original_filename=filename,
        cleaned_name=cleaned_name,
        detected_type=detected_type,
        detected_name=detected_name or cleaned_name,
        extension=extension,
        year=year,
        season=season,
        episode=episode,
        confidence=min(confidence, 100)
    )


def clean_for_search(filename: str) -> str:
    """Aggressive cleaner for metadata search: strips languages, subtitle
    markers, streaming services and channel counts on top of the usual tags.
    """
    cleaned = strip_extension(filename) if is_video_file(filename) else filename
    cleaned = re.sub(r'[._\-\[\]]', ' ', cleaned)
    cleaned = re.sub(r'\((?!(?:19|20)\d{2}\))[^)]*\)', ' ', cleaned)

    for regex in SEARCH_JUNK_REGEXES:
        cleaned = regex.sub(' ', cleaned)

    # Numbers other than years are channel counts or quality leftovers
    cleaned = re.sub(
        r'\b\d+\s*\d*\s*\b',
        lambda m: m.group(0) if re.fullmatch(r'(?:19|20)\d{2}', m.group(0).strip()) else ' ',
        cleaned
    )

    cleaned = re.sub(r'\s+', ' ', cleaned).strip()
    cleaned = re.sub(r'^[\s\-.,]+|[\s\-.,]+$', '', cleaned)

    cleaned = re.sub(r'\(\s*\)', '', cleaned)
    cleaned = re.sub(r'\(\s*\(', '(', cleaned)
    cleaned = re.sub(r'\)\s*\)', ')', cleaned)
    return cleaned


def extract_title_for_search(cleaned_name: str, max_words: int = 6) -> str:
    """First meaningful words of a cleaned name, stopping at a year"""
    title_words = []
    for word in cleaned_name.split():
        if re.fullmatch(r'\(?(?:19|20)\d{2}\)?', word):
            break
        if len(word) < 2:
            continue
        # A leading bare number is an index, later ones can be part of the title ("Iron Man 2")
        if word.isdigit() and not title_words:
            continue
        title_words.append(word)
        if len(title_words) >= max_words:
            break
    return ' '.join(title_words).strip()


def build_search_query(name: str) -> str:
    return extract_title_for_search(clean_for_search(name))
