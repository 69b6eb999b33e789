"""Starter budget provisioned for a new user."""

DEFAULT_BUDGET_NAME = "My Budget"

# Amounts are in cents.
DEFAULT_CATEGORIES: list[dict] = [
    {
        "name": "Food & Dining",
        "amount": 50000,
        "color": "#ef4444",
        "keywords": [
            "restaurant", "food", "dining", "lunch", "dinner", "cafe", "coffee",
            "starbucks", "mcdonalds", "burger", "pizza", "sushi", "taco", "subway",
            "wendys", "chipotle", "panera", "dunkin",
        ],
    },
    {
        "name": "Transportation",
        "amount": 30000,
        "color": "#3b82f6",
        "keywords": [
            "gas", "fuel", "uber", "lyft", "taxi", "bus", "train", "subway",
            "parking", "toll", "car", "auto", "oil", "tire", "repair", "maintenance",
        ],
    },
    {
        "name": "Shopping",
        "amount": 20000,
        "color": "#8b5cf6",
        "keywords": [
            "amazon", "target", "walmart", "store", "mall", "retail", "clothing",
            "shoes", "electronics", "home", "furniture", "department", "costco",
            "sams", "ikea",
        ],
    },
    {
        "name": "Entertainment",
        "amount": 15000,
        "color": "#f59e0b",
        "keywords": [
            "movie", "theater", "cinema", "netflix", "hulu", "spotify", "concert",
            "show", "game", "gaming", "sports", "event", "party", "bar", "club",
        ],
    },
    {
        "name": "Bills & Utilities",
        "amount": 40000,
        "color": "#10b981",
        "keywords": [
            "electric", "gas", "water", "internet", "phone", "cable", "utility",
            "bill", "payment", "rent", "mortgage", "insurance", "verizon",
            "comcast", "att",
        ],
    },
    {
        "name": "Healthcare",
        "amount": 25000,
        "color": "#06b6d4",
        "keywords": [
            "medical", "doctor", "hospital", "pharmacy", "dentist", "therapy",
            "medicine", "prescription", "clinic", "health", "cvs", "walgreens",
            "kaiser",
        ],
    },
    {
        "name": "Travel",
        "amount": 20000,
        "color": "#ec4899",
        "keywords": [
            "hotel", "flight", "airline", "vacation", "trip", "booking", "expedia",
            "airbnb", "travel", "vacation", "resort", "cruise", "rental", "car rental",
        ],
    },
    {
        "name": "Education",
        "amount": 10000,
        "color": "#84cc16",
        "keywords": [
            "school", "tuition", "book", "course", "class", "university", "college",
            "student", "loan", "textbook", "online course", "udemy", "coursera",
        ],
    },
]
