"""
Constant keyword tables shared by the amount selector and the category
classifier.

Every entry is stored folded (see utils.text.fold) so it can be compared
directly against folded receipt text. The tables are built once at import
and never mutated.
"""

from typing import Dict, Iterable, Tuple

from receipt_engine.models.receipt import TransactionCategory
from receipt_engine.utils.text import fold


def _folded(keywords: Iterable[str]) -> Tuple[str, ...]:
    result = []
    for keyword in keywords:
        folded = fold(keyword)
        if folded not in result:
            result.append(folded)
    return tuple(result)


# Lines stating the payable total
PRIORITY_KEYWORDS = _folded([
    'genel toplam', 'toplam', 'ödenecek', 'ödenecek tutar', 'tutar',
    'fatura tutarı', 'ödeme tutarı',
    'grand total', 'invoice total', 'total', 'amount due',
    'balance', 'payment amount',
])

# Lines stating cash tendered, change given or refunds; never the total
EXCLUSION_KEYWORDS = _folded([
    'nakit', 'para üstü', 'paraüstü', 'para ustu', 'iade',
    'change', 'cash', 'refund',
])

CURRENCY_SYMBOLS = ('₺', '$', '€', '£')
CURRENCY_CODES = ('TL', 'TRY', 'USD', 'EUR', 'GBP')

# Generic category vocabulary (category nouns and common merchants)
CATEGORY_KEYWORDS: Dict[TransactionCategory, Tuple[str, ...]] = {
    TransactionCategory.FOOD: _folded([
        'market', 'migros', 'bim', 'a101', 'şok', 'carrefour',
        'restaurant', 'restoran', 'cafe', 'kafe', 'yemek', 'kahve',
        'pasta', 'börek', 'kebap', 'pizza', 'hamburger', 'döner',
        'bakkal', 'manav', 'kasap', 'balık', 'tavuk',
    ]),
    TransactionCategory.TRANSPORT: _folded([
        'benzin', 'shell', 'opet', 'bp', 'petrol', 'motorin',
        'otopark', 'park', 'taksi', 'uber', 'otobüs', 'metro',
        'ulaşım', 'bilet', 'havayolu', 'uçak', 'tren', 'vapur',
    ]),
    TransactionCategory.SHOPPING: _folded([
        'alışveriş', 'giyim', 'ayakkabı', 'mağaza', 'butik',
        'elektronik', 'teknosa', 'vatan', 'media markt',
        'zara', 'h&m', 'defacto', 'lcw', 'mango',
        'mobilya', 'ikea', 'ev', 'dekorasyon',
    ]),
    TransactionCategory.BILLS: _folded([
        'fatura', 'elektrik', 'su', 'doğalgaz', 'gaz',
        'internet', 'telefon', 'gsm', 'turkcell', 'vodafone',
        'türk telekom', 'kira', 'aidat', 'apartman',
    ]),
    TransactionCategory.HEALTH: _folded([
        'eczane', 'pharmacy', 'ilaç', 'hastane', 'hospital',
        'klinik', 'doktor', 'dr', 'sağlık', 'poliklinik',
        'diş', 'göz', 'muayene', 'tahlil', 'check up',
    ]),
    TransactionCategory.ENTERTAINMENT: _folded([
        'sinema', 'cinema', 'film', 'bilet', 'ticket',
        'konser', 'tiyatro', 'müze', 'sergi', 'etkinlik',
        'eğlence', 'parti', 'gece', 'club', 'bar',
    ]),
    TransactionCategory.EDUCATION: _folded([
        'kitap', 'book', 'okul', 'üniversite', 'kurs',
        'eğitim', 'dershane', 'özel ders', 'kırtasiye',
        'not defteri', 'kalem', 'çanta', 'akademi',
    ]),
    # 'ödeme' and 'ücret' are left out on purpose: they appear on nearly
    # every receipt and would pull ordinary purchases into salary
    TransactionCategory.SALARY: _folded([
        'maaş', 'salary', 'gelir', 'income',
        'prim', 'bonus', 'ikramiye', 'serbest',
    ]),
    TransactionCategory.INVESTMENT: _folded([
        'yatırım', 'investment', 'hisse', 'borsa', 'altın',
        'döviz', 'bitcoin', 'kripto', 'fon', 'tahvil',
    ]),
}

# Merchant brands, checked in this order before any other signal
BRAND_GROUPS: Tuple[Tuple[str, TransactionCategory, Tuple[str, ...]], ...] = (
    ('supermarket', TransactionCategory.FOOD, _folded([
        'migros', 'carrefoursa', 'carrefour', 'a101', 'bim', 'şok',
        'macrocenter', 'hakmar', 'happy center', 'onur market',
    ])),
    ('restaurant', TransactionCategory.FOOD, _folded([
        'burger king', "mcdonald's", 'mcdonalds', 'kfc', "domino's",
        'dominos', 'popeyes', 'little caesars', 'simit sarayı', 'baydöner',
    ])),
    ('fuel_station', TransactionCategory.TRANSPORT, _folded([
        'shell', 'opet', 'bp', 'petrol ofisi', 'aytemiz', 'lukoil',
        'türkiye petrolleri',
    ])),
    ('transit', TransactionCategory.TRANSPORT, _folded([
        'istanbulkart', 'bitaksi', 'iett', 'tcdd', 'pegasus',
        'türk hava yolları', 'ispark',
    ])),
    ('utility', TransactionCategory.BILLS, _folded([
        'igdaş', 'enerjisa', 'ck enerji', 'turkcell',
        'vodafone', 'türk telekom', 'superonline',
    ])),
    ('pharmacy', TransactionCategory.HEALTH, _folded([
        'eczanesi', 'eczane', 'pharmacy',
    ])),
    ('entertainment', TransactionCategory.ENTERTAINMENT, _folded([
        'cinemaximum', 'cineverse', 'biletix', 'passo', 'netflix',
        'spotify',
    ])),
    ('clothing_electronics', TransactionCategory.SHOPPING, _folded([
        'zara', 'h&m', 'lc waikiki', 'lcw', 'defacto', 'koton', 'boyner',
        'teknosa', 'vatan bilgisayar', 'mediamarkt', 'media markt',
    ])),
)

# Vocabulary that marks a text as a receipt or invoice at all
RECEIPT_VOCABULARY = _folded([
    'fiş', 'fatura', 'makbuz', 'receipt', 'invoice',
    'toplam', 'total', 'tutar', 'amount',
    'kdv', 'vat', 'tax', 'vergi',
    'ödeme', 'payment', 'ödendi', 'paid',
])
