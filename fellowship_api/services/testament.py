# Testament Classifier
"""Map book names to the Old or New Testament."""

from fellowship_api.models.verse import Testament

OLD_TESTAMENT_BOOKS = frozenset([
    "Genesis", "Exodus", "Leviticus", "Numbers", "Deuteronomy", "Joshua", "Judges", "Ruth",
    "1 Samuel", "2 Samuel", "1 Kings", "2 Kings", "1 Chronicles", "2 Chronicles",
    "Ezra", "Nehemiah", "Esther", "Job", "Psalms", "Proverbs", "Ecclesiastes", "Song Of Solomon",
    "Isaiah", "Jeremiah", "Lamentations", "Ezekiel", "Daniel", "Hosea", "Joel", "Amos", "Obadiah",
    "Jonah", "Micah", "Nahum", "Habakkuk", "Zephaniah", "Haggai", "Zechariah", "Malachi",
])

NEW_TESTAMENT_BOOKS = frozenset([
    "Matthew", "Mark", "Luke", "John", "Acts", "Romans", "1 Corinthians", "2 Corinthians",
    "Galatians", "Ephesians", "Philippians", "Colossians", "1 Thessalonians", "2 Thessalonians",
    "1 Timothy", "2 Timothy", "Titus", "Philemon", "Hebrews", "James", "1 Peter", "2 Peter",
    "1 John", "2 John", "3 John", "Jude", "Revelation",
])


def normalize_book_name(book: str) -> str:
    """Title-case each word and collapse whitespace (``"1  john"`` -> ``"1 John"``)."""
    return " ".join(word[0].upper() + word[1:].lower() for word in book.split())


def classify_testament(book: str) -> Testament:
    """
    Classify a book name by testament.

    Names found in neither canon default to the New Testament.
    """
    name = normalize_book_name(book)
    if name in OLD_TESTAMENT_BOOKS:
        return Testament.OLD
    if name in NEW_TESTAMENT_BOOKS:
        return Testament.NEW
    return Testament.NEW
