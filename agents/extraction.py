"""Turn free-form reasoning-service replies into GeneratedArtifacts.

Extractors are tried in order; the first one that yields artifacts wins:
1. FencedCodeExtractor: ```ts / ```js / ```solidity blocks with @file hints
2. StructuredDataExtractor: a JSON object with a "files" list
An empty result means no match, which the ladder treats as a parse failure.
"""

import re
from typing import List, Optional, Sequence

from contracts import ArtifactLanguage, GeneratedArtifact, GenerationMethod, clamp_score
from providers import ResponseParseError
from providers.parsing import extract_json
from .naming import slugify

CODE_FENCE = re.compile(
    r"```(typescript|ts|tsx|javascript|js|jsx|solidity|sol)[ \t]*\n(.*?)```",
    re.DOTALL | re.IGNORECASE,
)
FILE_HINT = re.compile(r"@file\s+(\S+)")
DESCRIPTION_HINT = re.compile(r"@description\s+(.+)")
IMPORT_FROM = re.compile(r"""^\s*import\s+(?:.+?\s+from\s+)?['"]([^'"]+)['"]""", re.MULTILINE)
REQUIRE_CALL = re.compile(r"""require\(\s*['"]([^'"]+)['"]\s*\)""")

FENCE_LANGUAGES = {
    "typescript": ArtifactLanguage.TYPESCRIPT,
    "ts": ArtifactLanguage.TYPESCRIPT,
    "tsx": ArtifactLanguage.TYPESCRIPT,
    "javascript": ArtifactLanguage.JAVASCRIPT,
    "js": ArtifactLanguage.JAVASCRIPT,
    "jsx": ArtifactLanguage.JAVASCRIPT,
    "solidity": ArtifactLanguage.SOLIDITY,
    "sol": ArtifactLanguage.SOLIDITY,
}
EXTENSIONS = {
    ArtifactLanguage.TYPESCRIPT: ".ts",
    ArtifactLanguage.JAVASCRIPT: ".js",
    ArtifactLanguage.SOLIDITY: ".sol",
    ArtifactLanguage.JSON: ".json",
}


def language_for_path(path: str, default: ArtifactLanguage = ArtifactLanguage.TYPESCRIPT) -> ArtifactLanguage:
    for language, extension in EXTENSIONS.items():
        if path.endswith(extension):
            return language
    if path.endswith((".mjs", ".cjs", ".jsx")):
        return ArtifactLanguage.JAVASCRIPT
    return default


def extract_dependencies(code: str) -> List[str]:
    """Non-relative module names imported or required by the code, in first-seen order."""
    found = IMPORT_FROM.findall(code) + REQUIRE_CALL.findall(code)
    return list(dict.fromkeys(dep for dep in found if not dep.startswith(".")))


def score_code_confidence(code: str) -> int:
    """Heuristic confidence in a block of generated code."""
    score = 50
    if "import" in code:
        score += 10
    if "export" in code:
        score += 10
    if "interface" in code or "type " in code:
        score += 10
    if "try" in code and "catch" in code:
        score += 10
    if "@hashgraph/sdk" in code:
        score += 15
    if "async" in code and "await" in code:
        score += 5
    if "TODO" in code or "FIXME" in code:
        score -= 15
    if len(code) < 100:
        score -= 20
    if not any(token in code for token in ("function", "class", "=>")):
        score -= 10
    return clamp_score(score)


def synthesized_path(hint: str, index: int, language: ArtifactLanguage) -> str:
    return f"src/generated/{slugify(hint)}-{index}{EXTENSIONS[language]}"


class FencedCodeExtractor:
    """Extract artifacts from fenced code blocks."""

    def extract(self, response: str, hint: str) -> Optional[List[GeneratedArtifact]]:
        artifacts = []
        for index, match in enumerate(CODE_FENCE.finditer(response), start=1):
            tag, code = match.group(1).lower(), match.group(2).strip()
            if not code:
                continue
            fence_language = FENCE_LANGUAGES[tag]

            file_match = FILE_HINT.search(code)
            path = file_match.group(1).rstrip("*/").strip() if file_match else synthesized_path(hint, index, fence_language)
            description = DESCRIPTION_HINT.search(code)
            purpose = description.group(1).rstrip("*/").strip() if description else f"Implementation for: {hint}"

            artifacts.append(GeneratedArtifact(
                file_path=path,
                content=code,
                language=language_for_path(path, fence_language),
                purpose=purpose,
                dependencies=extract_dependencies(code),
                generation_method=GenerationMethod.REASONING_SERVICE_OUTPUT,
                confidence=score_code_confidence(code),
            ))
        return artifacts or None


class StructuredDataExtractor:
    """Extract artifacts from a JSON object of the form {"files": [{path, content, ...}]}."""

    def extract(self, response: str, hint: str) -> Optional[List[GeneratedArtifact]]:
        try:
            data = extract_json(response)
        except ResponseParseError:
            return None

        files = data.get("files")
        if not isinstance(files, list):
            return None

        artifacts = []
        for index, item in enumerate(files, start=1):
            if not isinstance(item, dict) or not item.get("content"):
                continue
            content = str(item["content"])
            declared = str(item.get("language", "")).lower()
            default_language = FENCE_LANGUAGES.get(declared, ArtifactLanguage.TYPESCRIPT)
            path = item.get("path") or item.get("file_path") or item.get("filePath") or synthesized_path(hint, index, default_language)
            dependencies = item.get("dependencies")

            artifacts.append(GeneratedArtifact(
                file_path=path,
                content=content,
                language=language_for_path(path, default_language),
                purpose=item.get("purpose") or f"Implementation for: {hint}",
                dependencies=list(dependencies) if isinstance(dependencies, list) else extract_dependencies(content),
                generation_method=GenerationMethod.REASONING_SERVICE_OUTPUT,
                confidence=score_code_confidence(content),
            ))
        return artifacts or None


class ResponseExtractor:
    """Chain of extractors; the first match wins."""

    def __init__(self, extractors: Optional[Sequence] = None):
        self.extractors = list(extractors) if extractors is not None else [
            FencedCodeExtractor(),
            StructuredDataExtractor(),
        ]

    def extract(self, response: str, hint: str) -> List[GeneratedArtifact]:
        """Artifacts found in response, or an empty list when nothing matches.

        Args:
            response: Raw reply text
            hint: Requirement or pattern text used to synthesize paths and purposes
        """
        for extractor in self.extractors:
            artifacts = extractor.extract(response or "", hint)
            if artifacts:
                return artifacts
        return []

    def extract_or_raise(self, response: str, hint: str) -> List[GeneratedArtifact]:
        """Like extract(), but no match is a ResponseParseError (a provider failure on the ladder)."""
        artifacts = self.extract(response, hint)
        if not artifacts:
            raise ResponseParseError("No code artifacts found in response")
        return artifacts
