"""
Fixed reply text for the local response generator.

Anything that is pure wording lives here; the generator only decides
which template applies and fills in catalog numbers.
"""

DIDNT_CATCH_THAT = "I didn't catch that. Could you please try again?"

GREETINGS = (
    "Hi! I'm here to help with your library. What are you looking for?",
    "Hello! I can help you find books, get recommendations, or answer questions about our collection.",
    "Hey there! Ask me about books, authors, or anything library-related.",
    "Hi! I'm your library assistant. How can I help you today?",
)

STAFF_EXAMPLE_QUESTIONS = (
    "How many books are available?",
    "How many books are currently reading?",
    "Show me books with 5-star ratings",
    "Do we have books by popular authors like Tolkien?",
    "What's our library's average rating?",
    "How many fiction books do we have?",
)

PATRON_EXAMPLE_QUESTIONS = (
    "Do you have books by Tolkien?",
    "Show me books by Harari",
    "Do you have 1984?",
    "Who wrote Dune?",
    "What's the rating of Dune?",
    "Recommend something good to read",
)

NO_MATCH_TIPS = (
    "Do you have books by Tolkien?",
    "Show me Harry Potter",
    "Find fantasy books",
    "What books by J.K. Rowling do you have?",
)

AI_MODE_ACTIVE = "🤖 **AI-Powered Mode Active**"
AI_MODE_LOCAL = "⚙️ **Standard Mode** (Configure an API key for advanced AI features)"

AI_STATUS_ENABLED = "🤖 AI-Powered Mode: advanced responses from the external model"
AI_STATUS_DISABLED = "🔧 Fallback Mode: rule-based responses (set an API key to enable AI)"

STAFF_HELP = """🔧 **Library Assistant Mode** - I can help you manage the library!

📊 **Status Questions:**
• "How many books are available?" - Count available books
• "How many books are read?" - Count completed books
• "How many fantasy books do we have?" - Genre counts

🔍 **Author & Title Searches:**
• "Do we have books by Tolkien?" - Find by author
• "Do we have 1984?" - Check specific titles
• "What's the rating of Dune?" - Get book ratings

📚 **Collection Analysis:**
• "Show me library statistics" - Collection analytics
• "Recommend books to promote" - Patron-facing picks
• "What genres do we have?" - Genre overview"""

PATRON_HELP = """📖 **Reading Assistant Mode** - I'm your personal reading companion!

ℹ️ **Get Book Information:**
• "Who wrote Dune?" - Author information
• "What's the rating of Dune?" - Book ratings
• "Is The Great Gatsby available?" - Check availability

🔍 **Find Books You'll Love:**
• "Do you have books by Tolkien?" - Author searches
• "Show me books by Harari" - Discover new authors
• "Do you have 1984?" - Check for specific titles

💬 **Just Talk Naturally:**
• "I'm bored, suggest something good"
• "I'm looking for Harry Potter"
• "Recommend me a fantasy book\""""

STAFF_SERVICES = """✨ Absolutely! I'm here to help with library management tasks. What do you need?

🔧 **Librarian Services:**
• 'Show me collection statistics'
• 'What are our most popular titles?'
• 'Help me analyze genre distribution'
• 'Find books with low ratings'"""

PATRON_SERVICES = """✨ Absolutely! I'd be happy to help you discover great books. What are you interested in?

📚 **Reader Services:**
• 'Do you have books by J.K. Rowling?'
• 'Show me books by Tolkien'
• 'I'm looking for The Hobbit'
• 'Recommend something exciting'"""

ADD_BOOK_DENIED = (
    "📚 Only librarians can add books to the library.\n\n"
    "You can rate and update existing books, or ask your librarian to add new titles!"
)

ADD_BOOK_GUIDANCE = """📝 **Add New Books to Your Library:**

Use the management interface to add books with details like:
• 📖 Title and Author
• 🎭 Genre (Fiction, Mystery, Sci-Fi, etc.)
• 📅 Publication Year
• ⭐ Initial Rating

💡 *Pro tip: Add diverse genres to give readers more options!*"""

DEFAULT_GENRES = (
    "Fiction, Mystery, Romance, Sci-Fi, Fantasy, Biography, History, Self-Help, Business"
)

RATING_INFO = """⭐ **About Book Ratings:**

• Rate books 1-5 stars (5 being excellent)
• Your ratings help improve recommendations
• Use the book management interface to rate books
• Highly rated books (4+ stars) appear in top recommendations"""

RATING_HOW_TO = (
    "⭐ To rate a book:\n1. Find the book in your list\n2. Select a rating from 1-5 stars\n"
    "3. Click update!\n\nRatings help me give better recommendations!"
)

THANKS_REPLY = "You're absolutely welcome! Happy reading! 📚✨ Feel free to ask me anything else about books!"

LIBRARY_STATS_RESTRICTED = "🔒 Library-wide statistics are restricted to librarians only."

PERSONAL_STATS_PLACEHOLDER = "📊 Feature coming soon! Track your personal reading journey."

ENABLE_AI_RECOMMENDATIONS_STAFF = (
    "🤖 *Enable AI for advanced collection analysis and acquisition recommendations!*"
)
ENABLE_AI_RECOMMENDATIONS_PATRON = (
    "🤖 *Enable AI for personalized recommendations based on your reading history!*"
)
ENABLE_AI_STATISTICS = "🤖 *Enable AI for advanced analytics and insights!*"

FALLBACK_REPLIES = (
    "🤔 I'd love to help! Could you tell me more about what you're looking for? "
    "I'm great with book recommendations, searches, and library questions!",
    "💭 Hmm, let me think... Are you looking for a specific book, want a recommendation, "
    "or need help with something else? Just ask naturally!",
    "🔍 I understand casual conversation! Try asking me things like 'I'm bored, suggest "
    "something' or 'Do you have any good mysteries?'",
    "📚 I'm not quite sure what you mean, but I love helping with books! "
    "Try phrasing it like 'Show me books by Tolkien' or 'Recommend a fantasy book'.",
)
