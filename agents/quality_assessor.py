"""Deterministic six-axis quality assessment of generated artifacts.

Pure: the same artifacts and request always give the same assessment. Each
axis starts from a base score and moves by fixed amounts for practices
found or defects detected; every axis is clamped to 0..100 and the overall
score is the rounded mean of the six.

Issues are defects (they describe something wrong in a specific file).
Recommendations are missing best practices and never count as defects.
"""

import re
from statistics import mean
from typing import List, Optional, Sequence

from contracts import (
    ArtifactLanguage,
    CompositionRequest,
    GeneratedArtifact,
    IssueCategory,
    IssueSeverity,
    QualityAssessment,
    QualityIssue,
    QualityRecommendation,
    clamp_score,
    round_half_up,
)

ALL_FILES = "*"

UNTYPED_ESCAPE = re.compile(r":\s*any\b|\bas\s+any\b|<any>")
TRY_BLOCK = re.compile(r"\btry\s*\{")
CATCH_BLOCK = re.compile(r"\bcatch\b")
ASYNC_KEYWORD = re.compile(r"\basync\b")
UNRESOLVED_MARKER = re.compile(r"\b(TODO|FIXME)\b")
TYPE_DECLARATION = re.compile(r"\binterface\s+\w+|\btype\s+\w+\s*=")

SECRET_NAME = re.compile(r"private_?key|operator_?key|secret|password|passwd|api_?key|access_?token", re.IGNORECASE)
CONSOLE_CALL = re.compile(r"console\.(log|info|debug|warn)\s*\(")
HARDCODED_CREDENTIAL = re.compile(
    r"""\b(\w*(?:key|secret|password|passwd|token|credential)\w*)\s*[:=]\s*['"`]([^'"`\s]{8,})['"`]""",
    re.IGNORECASE,
)
# Names like tokenId or topic_id hold ledger entity IDs, not secrets
IDENTIFIER_NAME = re.compile(r"(Id|ID|_id|Ids|IDs|_ids)$")
# Ledger entity IDs in shard.realm.num form
LEDGER_ID = re.compile(r"^\d+\.\d+\.\d+$")
DER_KEY_LITERAL = re.compile(r"['\"`]302[ae]0201")
DYNAMIC_EXECUTION = re.compile(r"\beval\s*\(|\bnew\s+Function\s*\(")
INPUT_VALIDATION = re.compile(r"validate\w*\s*\(|sanitiz", re.IGNORECASE)

SYNC_API = re.compile(r"\w+Sync\s*\(")
AWAIT_IN_LOOP = re.compile(r"\b(for|while)\s*\([^)]*\)\s*\{[^}]*\bawait\b", re.DOTALL)

FUNCTION_START = re.compile(
    r"^\s*(export\s+)?(default\s+)?(async\s+)?function\b"
    r"|^\s*(public\s+|private\s+|protected\s+)?(static\s+)?(async\s+)?\w+\s*\([^;]*\)\s*(:\s*[^{;]+)?\{\s*$"
    r"|=>\s*\{\s*$"
)
CONTROL_STATEMENT = re.compile(r"^\s*(\}\s*)?(if|for|while|switch|catch|else|do|try|return)\b")

STOPWORDS = frozenset({
    "need", "needs", "with", "that", "this", "from", "have", "should", "will", "want",
    "into", "each", "their", "they", "them", "which", "when", "where", "what", "also",
    "must", "more", "than", "able", "using", "build", "create",
})

MAX_FILE_LINES = 300
MAX_FUNCTION_LINES = 50


def requirement_keywords(description: str) -> List[str]:
    """Distinct requirement words longer than three letters, minus filler words."""
    words = re.findall(r"[a-z][a-z0-9-]*", description.lower())
    return list(dict.fromkeys(w for w in words if len(w) > 3 and w not in STOPWORDS))


def longest_function_lines(content: str) -> int:
    """Length in lines of the longest brace-delimited function body."""
    lines = content.splitlines()
    longest = 0
    for start, line in enumerate(lines):
        if CONTROL_STATEMENT.match(line) or not FUNCTION_START.search(line):
            continue
        depth, opened = 0, False
        for end in range(start, len(lines)):
            opens, closes = lines[end].count("{"), lines[end].count("}")
            opened = opened or opens > 0
            depth += opens - closes
            if opened and depth <= 0:
                longest = max(longest, end - start + 1)
                break
    return longest


def has_hardcoded_credential(content: str) -> bool:
    """True when a secret-looking name is assigned a quoted literal.

    Entity ID names (tokenId, topic_id) and ledger ID literals (0.0.1234) are not secrets.
    """
    for match in HARDCODED_CREDENTIAL.finditer(content):
        name, value = match.group(1), match.group(2)
        if IDENTIFIER_NAME.search(name) or LEDGER_ID.match(value):
            continue
        return True
    return False


class QualityAssessor:
    """Scores artifacts on structure, business logic, security, performance,
    maintainability and testability."""

    def assess(self, artifacts: Sequence[GeneratedArtifact], request: CompositionRequest) -> QualityAssessment:
        """Assess a set of artifacts against the request they were generated for.

        Args:
            artifacts: Generated files
            request: The composition request (requirement text and industry)

        Returns:
            QualityAssessment recomputed from scratch
        """
        issues: List[QualityIssue] = []
        recommendations: List[QualityRecommendation] = []

        scores = {
            "structural_quality": self._structural_quality(artifacts, issues, recommendations),
            "business_logic_accuracy": self._business_logic_accuracy(artifacts, request, issues),
            "security_compliance": self._security_compliance(artifacts, issues, recommendations),
            "performance": self._performance(artifacts, issues, recommendations),
            "maintainability": self._maintainability(artifacts, issues),
            "testability": self._testability(artifacts, recommendations),
        }

        return QualityAssessment(
            overall_score=round_half_up(mean(scores.values())),
            issues=issues,
            recommendations=recommendations,
            **scores,
        )

    @staticmethod
    def _issue(
        issues: List[QualityIssue],
        severity: IssueSeverity,
        category: IssueCategory,
        file: str,
        message: str,
        suggested_fix: Optional[str] = None,
    ) -> None:
        issues.append(QualityIssue(
            severity=severity,
            category=category,
            file=file,
            message=message,
            suggested_fix=suggested_fix,
        ))

    def _structural_quality(
        self,
        artifacts: Sequence[GeneratedArtifact],
        issues: List[QualityIssue],
        recommendations: List[QualityRecommendation],
    ) -> int:
        if not artifacts:
            return 0

        file_scores = []
        for artifact in artifacts:
            content, path = artifact.content, artifact.file_path
            score = 70
            has_error_handling = bool(TRY_BLOCK.search(content) and CATCH_BLOCK.search(content))

            if "export" in content or "module.exports" in content:
                score += 5
            if "import" in content or "require(" in content:
                score += 5
            if TYPE_DECLARATION.search(content):
                score += 10
            if has_error_handling:
                score += 15
            if "logger" in content:
                score += 10
            else:
                recommendations.append(QualityRecommendation(
                    file=path,
                    category=IssueCategory.MAINTAINABILITY,
                    message="Add structured logging through an injected logger",
                ))
            if "/**" in content:
                score += 10
            else:
                recommendations.append(QualityRecommendation(
                    file=path,
                    category=IssueCategory.MAINTAINABILITY,
                    message="Add documentation comments to exported members",
                ))
            if artifact.language == ArtifactLanguage.TYPESCRIPT:
                score += 10
            if "@hashgraph/sdk" in content:
                score += 15
            if "Client" in content:
                score += 5
            if "Transaction" in content:
                score += 5

            unexplained_any = [
                line for line in content.splitlines()
                if UNTYPED_ESCAPE.search(line) and "//" not in line
            ]
            if unexplained_any:
                score -= 5
                self._issue(
                    issues, IssueSeverity.MEDIUM, IssueCategory.TYPE_SAFETY, path,
                    f"Untyped 'any' used without explanation ({len(unexplained_any)} occurrence(s))",
                    "Replace 'any' with a concrete type or 'unknown'",
                )
            if ASYNC_KEYWORD.search(content) and not has_error_handling:
                score -= 10
                self._issue(
                    issues, IssueSeverity.HIGH, IssueCategory.ERROR_HANDLING, path,
                    "Asynchronous code without error handling",
                    "Wrap awaited calls in try/catch and log or rethrow failures",
                )
            if UNRESOLVED_MARKER.search(content):
                score -= 5
                self._issue(
                    issues, IssueSeverity.MEDIUM, IssueCategory.INCOMPLETE, path,
                    "Unresolved TODO/FIXME marker",
                    "Implement the marked logic",
                )
            file_scores.append(clamp_score(score))

        return round_half_up(mean(file_scores))

    def _business_logic_accuracy(
        self,
        artifacts: Sequence[GeneratedArtifact],
        request: CompositionRequest,
        issues: List[QualityIssue],
    ) -> int:
        code = "\n".join(a.content for a in artifacts).lower()
        keywords = requirement_keywords(request.requirement.description)
        found = [word for word in keywords if word in code]

        score = 80
        if keywords:
            score += round_half_up(len(found) / len(keywords) * 20)
            if not found:
                self._issue(
                    issues, IssueSeverity.MEDIUM, IssueCategory.LOGIC, ALL_FILES,
                    "Generated code does not reference any requirement terms",
                    "Name classes and methods after the business operations in the requirement",
                )

        industry = request.context.industry or request.requirement.context.industry
        if industry == "pharmaceutical":
            if "audit" in code or "compliance" in code:
                score += 10
            if "batch" in code or "serial" in code:
                score += 5
        elif industry == "financial-services":
            if "kyc" in code or "aml" in code:
                score += 10
            if "transaction" in code or "payment" in code:
                score += 5
        elif industry == "healthcare":
            if "hipaa" in code or "patient" in code or "consent" in code:
                score += 10
        elif industry == "insurance":
            if "claim" in code or "policy" in code:
                score += 10
        return clamp_score(score)

    def _security_compliance(
        self,
        artifacts: Sequence[GeneratedArtifact],
        issues: List[QualityIssue],
        recommendations: List[QualityRecommendation],
    ) -> int:
        code = "\n".join(a.content for a in artifacts)
        score = 70

        if INPUT_VALIDATION.search(code):
            score += 10
        elif artifacts:
            recommendations.append(QualityRecommendation(
                file=ALL_FILES,
                category=IssueCategory.SECURITY,
                message="Validate and sanitize inputs before submitting transactions",
            ))
        if "PrivateKey" in code and "fromString" in code:
            score += 10
        if TRY_BLOCK.search(code) and CATCH_BLOCK.search(code):
            score += 10
        if "logger.error" in code:
            score += 5

        unsafe_logging = hardcoded = dynamic = False
        for artifact in artifacts:
            content, path = artifact.content, artifact.file_path
            if CONSOLE_CALL.search(content) and SECRET_NAME.search(content):
                unsafe_logging = True
                self._issue(
                    issues, IssueSeverity.HIGH, IssueCategory.SECURITY, path,
                    "Console logging in a file that handles secrets",
                    "Log through a redacting logger and never print key material",
                )
            if has_hardcoded_credential(content) or DER_KEY_LITERAL.search(content) or "password123" in content:
                hardcoded = True
                self._issue(
                    issues, IssueSeverity.CRITICAL, IssueCategory.SECURITY, path,
                    "Hard-coded credential literal",
                    "Load credentials from environment or a secrets manager",
                )
            if DYNAMIC_EXECUTION.search(content):
                dynamic = True
                self._issue(
                    issues, IssueSeverity.CRITICAL, IssueCategory.SECURITY, path,
                    "Dynamic code execution (eval or new Function)",
                    "Remove dynamic evaluation",
                )

        if unsafe_logging:
            score -= 20
        if hardcoded:
            score -= 30
        if dynamic:
            score -= 25
        return clamp_score(score)

    def _performance(
        self,
        artifacts: Sequence[GeneratedArtifact],
        issues: List[QualityIssue],
        recommendations: List[QualityRecommendation],
    ) -> int:
        code = "\n".join(a.content for a in artifacts)
        score = 75

        if re.search(r"cache|memoiz", code, re.IGNORECASE):
            score += 10
        elif "Query" in code:
            recommendations.append(QualityRecommendation(
                file=ALL_FILES,
                category=IssueCategory.PERFORMANCE,
                message="Cache repeated network queries",
            ))
        if "Promise.all" in code or "parallel" in code:
            score += 10
        if "async" in code and "await" in code:
            score += 10
        if "batch" in code or "bulk" in code:
            score += 5

        blocking = sequential = False
        for artifact in artifacts:
            if SYNC_API.search(artifact.content):
                blocking = True
                self._issue(
                    issues, IssueSeverity.MEDIUM, IssueCategory.PERFORMANCE, artifact.file_path,
                    "Blocking synchronous API call",
                    "Use the asynchronous variant",
                )
            if AWAIT_IN_LOOP.search(artifact.content):
                sequential = True
                self._issue(
                    issues, IssueSeverity.MEDIUM, IssueCategory.PERFORMANCE, artifact.file_path,
                    "Sequential await inside a loop",
                    "Collect the promises and await them with Promise.all",
                )

        if blocking:
            score -= 10
        if sequential:
            score -= 15
        return clamp_score(score)

    def _maintainability(self, artifacts: Sequence[GeneratedArtifact], issues: List[QualityIssue]) -> int:
        score = 80
        for artifact in artifacts:
            content, path = artifact.content, artifact.file_path
            if "interface" in content:
                score += 5
            if "/**" in content:
                score += 5
            if "export" in content:
                score += 5

            line_count = len(content.splitlines())
            if line_count > MAX_FILE_LINES:
                score -= 10
                self._issue(
                    issues, IssueSeverity.MEDIUM, IssueCategory.MAINTAINABILITY, path,
                    f"File is {line_count} lines long",
                    "Split the file by responsibility",
                )
            function_lines = longest_function_lines(content)
            if function_lines > MAX_FUNCTION_LINES:
                score -= 10
                self._issue(
                    issues, IssueSeverity.LOW, IssueCategory.MAINTAINABILITY, path,
                    f"Function spans {function_lines} lines",
                    "Extract helper functions",
                )
        return clamp_score(score)

    def _testability(
        self,
        artifacts: Sequence[GeneratedArtifact],
        recommendations: List[QualityRecommendation],
    ) -> int:
        code = "\n".join(a.content for a in artifacts)
        score = 70

        if "inject" in code.lower() or re.search(r"constructor\s*\(\s*[^)\s]", code):
            score += 10
        elif artifacts:
            recommendations.append(QualityRecommendation(
                file=ALL_FILES,
                category=IssueCategory.TESTABILITY,
                message="Inject clients and loggers through the constructor",
            ))
        if "interface" in code and "implements" in code:
            score += 10
        if "export class" in code:
            score += 10
        if "async" in code and "return" in code:
            score += 5
        if "static" in code and "private" in code:
            score -= 10
        if "singleton" in code.lower() or "getInstance" in code:
            score -= 10
        return clamp_score(score)
