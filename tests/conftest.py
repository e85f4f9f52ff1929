import pytest

from decision2json.normalizer import normalize_text

SAMPLE_DECISION = (
    "החלטת שמאי מכריע בעניין גוש 6100 חלקה 12 ברחוב הרצל בתל אביב\n"
    "1. טענות שמאי המבקשים\n"
    "לטענת המבקשים שווי הקרקע הוא 12,000 ₪ למ\"ר ומקדם דחייה: 0.85 לפי הנוהג.\n"
    "2. טענות שמאי המשיבה\n"
    "שמאי המשיבה העריך את השווי ב-9,500 ₪ למ\"ר ומקדם דחייה: 0.90 בהתאם לתקן.\n"
    "3. עסקאות השוואה\n"
    "נמכרה דירה ברחוב סמוך תמורת 1,250,000 ₪ בתאריך 15.03.2019 לפי נסח הרישום.\n"
    "4. תחשיב השבחה\n"
    "ההשבחה חושבה לפי תוספת שווי של 1,500 ₪ למ\"ר על פי התכנית.\n"
    "5. הכרעה\n"
    "לאחר ששקלתי את מכלול הנתונים אני קובע שווי של 10,500 ₪ למ\"ר ומקדם דחייה: 0.88 לכל הזכויות.\n"
)

# No headers and no fallback markers
HEADERLESS_DECISION = (
    "הנכס נמצא ברחוב הזית בעיר חיפה והוא כולל דירת מגורים בת ארבעה חדרים בקומה השנייה של הבניין.\n"
    "במסגרת הבדיקה נמצא כי מקדם דחייה 0.75 מתאים לנסיבות הנכס ולמיקומו בשכונה.\n"
)

# Ruling only reachable through an inline marker
FALLBACK_DECISION = (
    "הנכס נמצא ברחוב הזית בעיר חיפה והוא כולל דירת מגורים בת ארבעה חדרים בקומה השנייה של הבניין.\n"
    "לאחר ששקלתי את הנתונים שהוצגו בפני אני קובע כי השווי הוא 8,000 ₪ למ\"ר לכל שטח הדירה.\n"
)

# One combined section for both parties
COMBINED_CLAIMS_DECISION = (
    "הנכס נמצא ברחוב הזית בעיר חיפה והוא כולל דירת מגורים בת ארבעה חדרים בקומה השנייה של הבניין.\n"
    "טענות הצדדים\n"
    "שמאי המבקש העריך שווי של 7,000 ₪ למ\"ר ואילו שמאי הוועדה העריך 5,000 ₪ למ\"ר בלבד.\n"
)


@pytest.fixture
def sample_text():
    return SAMPLE_DECISION


@pytest.fixture
def normalized_sample():
    return normalize_text(SAMPLE_DECISION)


@pytest.fixture
def headerless_text():
    return HEADERLESS_DECISION


@pytest.fixture
def fallback_text():
    return FALLBACK_DECISION


@pytest.fixture
def combined_claims_text():
    return COMBINED_CLAIMS_DECISION


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "decision 2019-17.txt"
    path.write_text(SAMPLE_DECISION, encoding="utf-8")
    return path
