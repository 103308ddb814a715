from __future__ import annotations

import re
from typing import Any, Dict, List, Tuple

from bs4 import BeautifulSoup
from pypdf import PdfReader

MIN_PDF_TEXT_CHARS = 200

# heading variants as they appear in the resume PDF, in priority order per section
SECTION_HEADINGS: Dict[str, Tuple[str, ...]] = {
    "academic": ("ACADEMIC QUALIFICATIONS", "ACADEMIC DETAILS", "EDUCATION", "Education"),
    "experience": (
        "PROFESSIONAL EXPERIENCE",
        "WORK EXPERIENCE",
        "INTERNSHIPS",
        "EXPERIENCE",
        "Experience",
    ),
    "projects": ("ACADEMIC PROJECTS", "KEY PROJECTS", "PROJECTS", "Projects"),
    "certifications": ("CERTIFICATIONS", "Certifications"),
    "publications": ("PUBLICATIONS", "RESEARCH PAPERS", "Publications"),
    "skills": ("TECHNICAL SKILLS", "SKILLS", "Skills"),
    "extraCurricular": (
        "EXTRA-CURRICULAR ACTIVITIES",
        "EXTRA CURRICULAR ACTIVITIES",
        "EXTRACURRICULAR ACTIVITIES",
        "Extra-Curricular",
    ),
    "achievements": ("ACHIEVEMENTS", "AWARDS", "Achievements"),
}

_BULLET_SPLIT = re.compile(r"\s*[•●▪◦]\s*|\s+\*\s+")
_SKILL_SPLIT = re.compile(r"\s*[,;|]\s*")


def extract_pdf_text(path: str) -> str:
    """Read every page of a PDF and collapse whitespace."""
    reader = PdfReader(path)
    chunks = [page.extract_text() or "" for page in reader.pages]
    return " ".join(" ".join(chunks).split())


def _find_sections(text: str) -> List[Tuple[int, int, str]]:
    found: List[Tuple[int, int, str]] = []
    for key, headings in SECTION_HEADINGS.items():
        for heading in headings:
            m = re.search(rf"(?<![A-Za-z]){re.escape(heading)}(?![A-Za-z])", text)
            if m:
                found.append((m.start(), m.end(), key))
                break
    found.sort()

    # drop headings swallowed by a longer heading that starts earlier
    spans: List[Tuple[int, int, str]] = []
    for start, end, key in found:
        if spans and start < spans[-1][1]:
            continue
        spans.append((start, end, key))
    return spans


def _split_items(body: str) -> List[str]:
    items = [p.strip(" :-–") for p in _BULLET_SPLIT.split(body)]
    return [i for i in items if len(i) > 1]


def parse_resume_to_json(raw_text: str) -> Dict[str, List[str]]:
    """Split flattened resume text into sections of short items.

    Args:
        raw_text: Whitespace-collapsed resume text.

    Returns:
        Mapping of section key to list of item strings. Sections whose heading
        is absent map to an empty list.
    """
    result: Dict[str, List[str]] = {key: [] for key in SECTION_HEADINGS}
    text = " ".join((raw_text or "").split())
    spans = _find_sections(text)

    for idx, (_, end, key) in enumerate(spans):
        stop = spans[idx + 1][0] if idx + 1 < len(spans) else len(text)
        body = text[end:stop]
        items = _split_items(body)
        if key == "skills":
            items = [s for item in items for s in _SKILL_SPLIT.split(item) if s]
        result[key] = items

    return result


def _text(node: Any, sep: str = " ") -> str:
    if node is None:
        return ""
    return " ".join(node.get_text(sep, strip=True).split())


def parse_portfolio_html(html: str) -> Dict[str, Any]:
    """Scrape the portfolio page for summary, education, projects, certifications, achievements."""
    soup = BeautifulSoup(html or "", "html.parser")
    out: Dict[str, Any] = {
        "summary": "",
        "education": [],
        "projects": [],
        "certifications": [],
        "achievements": [],
    }

    about = soup.select_one("#about .about-text") or soup.select_one("#about")
    out["summary"] = _text(about)

    education = soup.select_one("#education")
    if education is not None:
        for heading in education.find_all(["h3", "h4"]):
            degree = _text(heading)
            if not degree:
                continue
            details = _text(heading.parent).replace(degree, "", 1).strip()
            out["education"].append({"degree": degree, "details": details})

    for card in soup.select("#projects .project-card"):
        name = _text(card.find(["h3", "h4"]))
        details = [_text(p) for p in card.find_all(["p", "li"]) if _text(p)]
        if name:
            out["projects"].append({"name": name, "details": details})

    certs = soup.select_one("[id*=certif]") or soup.select_one("#achievements")
    if certs is not None:
        for heading in certs.find_all(["h3", "h4"]):
            title = _text(heading)
            issuer_node = heading.find_next_sibling(["p", "span"])
            if title:
                out["certifications"].append({"title": title, "issuer": _text(issuer_node)})

    achievements = soup.select_one("#achievements")
    if achievements is not None:
        out["achievements"] = [_text(li) for li in achievements.find_all("li") if _text(li)]

    return out
