from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from bs4 import BeautifulSoup

from portfolio_chat.core.resume_parser import (
    MIN_PDF_TEXT_CHARS,
    extract_pdf_text,
    parse_portfolio_html,
    parse_resume_to_json,
)

logger = logging.getLogger(__name__)

LIST_KEYS = (
    "education",
    "experience",
    "projects",
    "skills",
    "certifications",
    "publications",
    "achievements",
)

NO_PROFILE_CONTEXT = "No profile information found on page."
PROFILE_CONTEXT_ERROR = "Error gathering profile context."


def fallback_resume(owner_name: str, owner_summary: str) -> Dict[str, Any]:
    resume: Dict[str, Any] = {"name": owner_name, "summary": owner_summary}
    for key in LIST_KEYS:
        resume[key] = []
    return resume


def _merge_pdf(resume: Dict[str, Any], pdf_json: Dict[str, List[str]]) -> None:
    resume["academic"] = pdf_json.get("academic") or []
    for key in ("projects", "experience", "certifications", "publications", "skills"):
        resume[key] = pdf_json.get(key) or []
    resume["extraCurricular"] = pdf_json.get("extraCurricular") or []
    if pdf_json.get("achievements"):
        resume["achievements"] = list(pdf_json["achievements"])


def _merge_portfolio(resume: Dict[str, Any], portfolio: Dict[str, Any]) -> None:
    resume["summary"] = portfolio.get("summary") or resume.get("summary")
    if portfolio.get("education"):
        resume["education"] = portfolio["education"]
    else:
        resume["education"] = [
            {"degree": a, "details": ""} for a in resume.get("academic") or []
        ]
    resume["projects"] = list(resume.get("projects") or []) + portfolio.get("projects", [])
    resume["certifications"] = list(resume.get("certifications") or []) + [
        f"{c.get('title', '')} - {c.get('issuer', '')}"
        for c in portfolio.get("certifications", [])
    ]
    resume["achievements"] = list(resume.get("achievements") or []) + portfolio.get(
        "achievements", []
    )


def load_resume(
    pdf_path: str,
    html_path: str,
    *,
    owner_name: str,
    owner_summary: str,
) -> Tuple[Dict[str, Any], List[str]]:
    """Build the resume JSON: PDF first, portfolio HTML as a supplement, fallback last.

    Args:
        pdf_path: Path to the resume PDF (may not exist).
        html_path: Path to the portfolio index.html (may not exist).
        owner_name: Name used by the fallback resume.
        owner_summary: Summary used by the fallback resume.

    Returns:
        Tuple of (resume dict, list of source labels that contributed).
    """
    resume = fallback_resume(owner_name, owner_summary)
    sources: List[str] = []

    if os.path.exists(pdf_path):
        raw_text = extract_pdf_text(pdf_path)
        if len(raw_text) > MIN_PDF_TEXT_CHARS:
            _merge_pdf(resume, parse_resume_to_json(raw_text))
            sources.append("PDF")
        else:
            logger.warning("Resume PDF text too short (%s chars); skipping", len(raw_text))

    if os.path.exists(html_path):
        with open(html_path, "r", encoding="utf-8") as f:
            portfolio = parse_portfolio_html(f.read())
        _merge_portfolio(resume, portfolio)
        sources.append("Portfolio HTML")

    for key in LIST_KEYS:
        if not isinstance(resume.get(key), list):
            resume[key] = []

    logger.info(
        "Resume loaded from %s | Projects: %s | Experience: %s",
        " + ".join(sources) or "fallback",
        len(resume["projects"]),
        len(resume["experience"]),
    )
    return resume, sources


# page sections in the order they appear in the widget context
CONTEXT_SECTIONS: Tuple[Tuple[str, str], ...] = (
    ("#projects", "=== PROJECTS ==="),
    ("#skills", "=== SKILLS & EXPERTISE ==="),
    ("#experience", "=== PROFESSIONAL EXPERIENCE ==="),
    ("#education", "=== EDUCATION ==="),
)


def _inner_text(node: Any) -> str:
    if node is None:
        return ""
    lines = [ln.strip() for ln in node.get_text("\n").splitlines()]
    return "\n".join(ln for ln in lines if ln)


@dataclass
class PortfolioPage:
    """Text views of the portfolio page used by the chat terminal."""

    owner_name: str
    context: str = NO_PROFILE_CONTEXT
    about: str = ""
    project_names: List[str] = field(default_factory=list)

    @classmethod
    def from_html(cls, html: str, owner_name: str) -> "PortfolioPage":
        try:
            soup = BeautifulSoup(html or "", "html.parser")
            context = gather_profile_context(soup, owner_name)
        except Exception as exc:
            logger.error("Context gathering error: %s", exc)
            return cls(owner_name=owner_name, context=PROFILE_CONTEXT_ERROR)

        names = [
            " ".join(card.find(["h3", "h4"]).get_text(" ", strip=True).split())
            for card in soup.select("#projects .project-card")
            if card.find(["h3", "h4"]) is not None
        ]
        return cls(
            owner_name=owner_name,
            context=context,
            about=_inner_text(soup.select_one("#about .about-text")),
            project_names=names,
        )


def gather_profile_context(soup: BeautifulSoup, owner_name: str) -> str:
    """Flatten the visible profile sections of the page into one context string."""
    certifications = soup.select_one("#achievements") or soup.select_one("[id*=certif]")
    parts = [
        f"=== {owner_name.upper()} - PROFESSIONAL PROFILE ===",
        "",
        _inner_text(soup.select_one("#about")),
    ]
    for selector, heading in CONTEXT_SECTIONS:
        parts.extend(["", heading, _inner_text(soup.select_one(selector))])
    parts.extend(["", "=== CERTIFICATIONS & ACHIEVEMENTS ===", _inner_text(certifications)])

    body = [p for p in parts if p.strip()]
    # headings alone carry no profile information
    if all(p.startswith("===") for p in body):
        return NO_PROFILE_CONTEXT
    return "\n".join(body)
