#!/usr/bin/env python3
"""
Tag dictionary for Media Organizer
Static sets of release-group, quality, codec and audio tokens shared by the
classifier, the search-query cleaner and the duplicate detector.
"""

import re


# Video formats accepted by the scanner and the watcher
VIDEO_EXTENSIONS = {
    '.mkv', '.mp4', '.avi', '.mov', '.wmv', '.flv', '.webm', '.m4v',
    '.mpg', '.mpeg', '.ts', '.m2ts'
}

# Tokens removed as whole words by the general cleaner (case-insensitive)
RELEASE_GROUPS = [
    # Release groups / sites
    "hdhub4u", "yts", "rarbg", "1337x", "yify", "ettv", "eztv", "lol", "dimension",
    "fgt", "sparks", "axxo", "fxg", "batv", "ntb", "mkvcage", "pahe", "psa",
    "tamilrockers", "filmyzilla", "movierulz", "khatrimaza", "bolly4u", "worldfree4u",
    "filmywap", "mp4moviez", "9xmovies", "downloadhub", "cinevood", "katmoviehd",
    "moviesverse", "vegamovies", "ssrmovies", "themoviesflix", "hubflix", "filmyhit",
    "extramovies", "moviesbaba", "skymovieshd", "movieswood", "jalshamoviez",

    # Quality tags
    "hdtv", "webrip", "bluray", "brrip", "dvdrip", "web-dl", "webdl", "hdrip",
    "hdcam", "camrip", "cam", "ts", "telesync", "dvdscr", "screener", "r5",
    "720p", "1080p", "2160p", "4k", "uhd", "hd", "sd", "480p", "360p",
    "hdr", "hdr10", "dolby", "atmos", "truehd", "dts-hd", "dts-x",

    # Codecs
    "x264", "x265", "hevc", "h264", "h265", "aac", "ac3", "dts", "mp3",
    "avc", "xvid", "divx", "mpeg", "vp9", "av1", "10bit", "8bit",

    # Audio / language
    "hindi", "english", "dual", "audio", "dubbed", "multi", "org",
    "esub", "esubs", "subs", "subtitle", "subtitles", "hardsub", "softsub",
    "tam", "tel", "kan", "mal", "ben", "mar", "guj", "pun",

    # Misc tags
    "extended", "unrated", "directors", "cut", "remastered", "imax",
    "proper", "real", "rerip", "repack", "internal", "limited",
    "telegram", "channel", "group", "rip", "print", "clean",
    "amzn", "nf", "hulu", "dsnp", "atvp", "hmax", "zee5", "hotstar",
]

# Tokens that end a series title during token walking.
# Stored normalized: lowercase, no dots or dashes.
QUALITY_TAGS = {
    '720p', '1080p', '2160p', '4k', 'hdtv', 'web', 'webrip', 'webdl',
    'bluray', 'brrip', 'bdrip', 'dvdrip', 'hdrip', 'hdtvrip',
    'x264', 'x265', 'hevc', 'h264', 'h265', 'avc',
    'aac', 'ac3', 'dts', 'ddp', 'ddp5', 'dd5', 'ddp51', 'atmos', 'truehd',
    'proper', 'repack', 'internal', 'readnfo', 'extended', 'uncut', 'unrated',
    '10bit', '8bit', 'hdr', 'hdr10', 'sdr', 'dv', 'dolby', 'vision',
    'amzn', 'nf', 'hmax', 'dsnp', 'atvp', 'pcok', 'hulu', 'max',
    # Release groups / uploaders
    'telly', 'yts', 'rarbg', 'eztv', 'ettv', 'lol', 'dimension', 'sparks',
    'ntg', 'ntb', 'flux', 'phoenix', 'ggez', 'ggwp', 'cakes', 'gossip',
    'glhf', 'cmrg', 'sigma', 'mkvcage', 'pahe', 'psa', 'tepes',
    'successors', 'hone', 'evo', 'fgt', 'yify', 'galactica', 'memento',
    'syncopy', 'nogrp', 'ion10', 'playwave', 'frds', 'npms', 'deejayahmed',
}

RELEASE_GROUP_SET = {group.lower() for group in RELEASE_GROUPS}

# Compiled once; order matters for overlapping entries (dts-hd before dts)
RELEASE_GROUP_REGEXES = [
    re.compile(rf'\b{re.escape(group)}\b', re.IGNORECASE) for group in RELEASE_GROUPS
]

# Junk removed by the aggressive cleaner that builds metadata search queries.
# Format: (pattern, description)
SEARCH_JUNK_PATTERNS = [
    (r'\b(?:720p|1080p|2160p|4k|hd|fhd|uhd|sd)\b', 'Resolutions'),
    (r'\b(?:hdtv|webdl|web-dl|webrip|web|bluray|bdrip|brrip|dvdrip|hdrip|hdtc|hdts|hdcam|cam|ts|tc|r5|dvdscr|screener|pre)\b', 'Sources'),
    (r'\b(?:remux|proper|repack|internal|real|extended|uncut|unrated|theatrical|directors?\.?cut)\b', 'Editions'),
    (r'\b(?:x264|x265|h\.?264|h\.?265|hevc|avc|xvid|divx|10bit|8bit|hdr|hdr10|sdr|dv|dolby\.?vision)\b', 'Video codecs'),
    (r'\b(?:aac|ac3|dts|dts-hd|truehd|atmos|flac|mp3|eac3)\b', 'Audio codecs'),
    (r'\b(?:ddp?5?\.?1|dd5?\.?1|dd2?\.?0|5\.1|7\.1|2\.0|dts-x)\b', 'Audio channels'),
    (r'\b(?:ddp|ddpa|dts|dd)\d*\.?\d*\b', 'Audio channel suffixes'),
    (r'\b(?:amzn|amazon|nf|netflix|hmax|hbo|dsnp|disney\+?|atvp|apple|pcok|peacock|hulu|max|hotstar|hs|jhs|zee5|sonyliv|jio|voot|mxplayer)\b', 'Streaming services'),
    (r'\b(?:hindi|english|tamil|telugu|malayalam|kannada|bengali|marathi|punjabi|gujarati|spanish|french|german|italian|japanese|korean|chinese|russian|portuguese|arabic|thai|vietnamese|indonesian|dutch|polish|turkish|swedish|norwegian|danish|finnish|greek|hebrew|hungarian|czech|romanian|ukrainian|persian|urdu)\b', 'Languages'),
    (r'\b(?:hin|eng|tam|tel|mal|kan|ben|mar|pun|chi|kor|jap|spa|fre|ger|ita|rus|por|ara|tha|vie|ind|dut|pol|tur|swe|nor|dan|fin|gre|heb|hun|cze|rom|ukr|per|urd)\b', 'Language codes'),
    (r'\b(?:dual|multi|dual-audio|multi-audio)\b', 'Multi-audio markers'),
    (r'\b(?:esub|esubs|subs?|subtitles?|hcsub|hc|msub|msubs|subtitled)\b', 'Subtitle markers'),
    (r'\b(?:yts|yify|rarbg|eztv|ettv|lol|dimension|sparks|ntg|ntb|flux|phoenix|ggez|ggwp|gossip|cmrg|sigma|mkvcage|pahe|psa|tepes|hone|evo|fgt|galactica|memento|syncopy|nogrp|ion10|playwave|frds|npms|successors|telly|cakes|glhf|deejayahmed|hdhub4u|kingdom|katmoviehd|grab|ms|tv|rg)\b', 'Release groups'),
    (r'\b(?:hq|lq|line|clear|proper|clean)\b', 'Quality indicators'),
    (r'\b(?:www|com|org|net|to|in|me|cc|ws|sx)\b', 'Web junk'),
    (r'\b(?:v2|v3|v4)\b', 'Version markers'),
    (r'\baka\b', 'Alias marker'),
]

SEARCH_JUNK_REGEXES = [re.compile(pattern, re.IGNORECASE) for pattern, _description in SEARCH_JUNK_PATTERNS]
