"""
Grounding prompt sent to the external text-generation service.

The prompt embeds the caller's role, the complete catalog, aggregate
statistics, and explicit accuracy rules so the model answers only from
the inventory it was given.
"""

from typing import Iterable

from catalog_chat.config import settings
from catalog_chat.schemas.catalog_schema import CatalogEntry, Role
from catalog_chat.tools.catalog import average_rating, genre_counts

_assistant = settings.assistant

ASSISTANT_CONTEXT = f"""You are {_assistant.name}, an intelligent assistant for {_assistant.library_name}'s \
Library Management System. You help with book discovery, recommendations, library statistics, \
and management tasks.
"""

ROLE_CONTEXT = {
    Role.STAFF: (
        "USER ROLE: Librarian{name}\n"
        "PERMISSIONS: Full library management, statistics, user insights, book operations\n"
    ),
    Role.PATRON: (
        "USER ROLE: Library User{name}\n"
        "PERMISSIONS: Book browsing, rating, status updates, personal statistics\n"
    ),
}

CAPABILITIES = """
YOUR CAPABILITIES:
📚 Book Search & Discovery: Help find books by title, author, genre, year
⭐ Smart Recommendations: Suggest books based on preferences and ratings
📊 Statistics & Analytics: Provide reading insights and library metrics
➕ Library Management: Guide users through adding, updating, removing books
"""

ACCURACY_RULES = """
CRITICAL ACCURACY RULES:
1. ONLY reference books that are listed in the EXACT BOOK LIST above
2. Use EXACT titles and authors as shown in the inventory
3. If a book is not in the list, say 'We don't have that book'
4. Always check Status and Rating information from the inventory
5. Give direct, specific answers based on the actual data
6. Never make up or assume information about books not in the list
"""

EMPTY_INVENTORY_RULES = """
CRITICAL ACCURACY RULES:
1. The library inventory is currently empty
2. If asked about any book, say 'We don't have that book'
3. Never make up or assume information about books
"""

RESPONSE_GUIDELINES = """
RESPONSE GUIDELINES:
- Be helpful, friendly, and book-focused
- Keep responses concise and direct
- Reference actual library data from the inventory above
- Include status and rating when relevant
"""

ROLE_GUIDELINE = {
    Role.STAFF: "- Provide management insights and operational suggestions\n",
    Role.PATRON: "- Focus on reading recommendations and personal library experience\n",
}


def format_inventory_line(entry: CatalogEntry) -> str:
    """One inventory line: "title" by author (year, genre, Status: S, Rating: R/5)."""
    return (
        f'• "{entry.title}" by {entry.author} ({entry.year}, {entry.genre or "Unknown"}, '
        f"Status: {entry.status.label}, Rating: {entry.rating}/5)"
    )


def build_inventory_section(entries: list[CatalogEntry]) -> str:
    lines = ["", "COMPLETE LIBRARY INVENTORY:", f"Total Books: {len(entries)}", ""]
    if not entries:
        return "\n".join(lines)

    lines.append("EXACT BOOK LIST (use this for all queries):")
    lines.extend(format_inventory_line(e) for e in entries)
    lines.append("")
    lines.append(build_statistics_section(entries))
    return "\n".join(lines)


def build_statistics_section(entries: Iterable[CatalogEntry]) -> str:
    entries = list(entries)
    genres = {g.lower(): n for g, n in genre_counts(entries).items()}
    lines = [
        "LIBRARY STATISTICS:",
        f"- Fiction Books: {genres.get('fiction', 0)}",
        f"- Non-Fiction Books: {genres.get('non-fiction', 0)}",
    ]
    for genre, count in genre_counts(entries).most_common(5):
        lines.append(f"- {genre}: {count} books")
    lines.append(f"- Average Rating: {average_rating(entries):.1f}/5")
    return "\n".join(lines)


def build_grounding_prompt(role: Role, catalog: list[CatalogEntry], display_name: str = "") -> str:
    """Assemble the full system instruction block for one turn."""
    name = f" ({display_name})" if display_name else ""
    return (
        ASSISTANT_CONTEXT
        + "\n"
        + ROLE_CONTEXT[role].format(name=name)
        + build_inventory_section(catalog)
        + "\n"
        + CAPABILITIES
        + (ACCURACY_RULES if catalog else EMPTY_INVENTORY_RULES)
        + RESPONSE_GUIDELINES
        + ROLE_GUIDELINE[role]
    )
