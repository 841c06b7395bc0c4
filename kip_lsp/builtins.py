"""
builtins.py - Documentação de funções, tipos e palavras-chave embutidas

Propósito:
    Catálogo estático usado pelo hover (descrição e exemplo), pelo
    completion (funções embutidas) e pelo parser (nomes conhecidos para
    resolver sufixos: "toplamını" → "toplamı").

Notas de implementação:
    - Textos voltados ao usuário ficam em turco, a língua do Kip
    - category: io, arithmetic, comparison, string, keyword, type, constant
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class BuiltinDoc:
    signature: str
    description: str
    example: str
    category: str


BUILTINS: Dict[str, BuiltinDoc] = {
    # G/Ç
    "yazmak": BuiltinDoc(
        "(değeri) yazmak", "Verilen değeri ekrana yazdırır.",
        '"Merhaba Dünya"yı yaz.', "io",
    ),
    "yaz": BuiltinDoc(
        "(değeri) yaz", "Verilen değeri ekrana yazdırır (kısa form).",
        "5'i yaz.", "io",
    ),
    "okumak": BuiltinDoc(
        "(isim olarak) okumak", "Kullanıcıdan girdi okur ve verilen değişkene atar.",
        "isim olarak okuyup,", "io",
    ),
    "oku": BuiltinDoc(
        "(isim olarak) oku", "Kullanıcıdan girdi okur (kısa form).",
        "değer olarak oku.", "io",
    ),
    # Aritmetik
    "toplamı": BuiltinDoc(
        "(bu değerle) (şu değerin) toplamı", "İki sayının toplamını hesaplar.",
        "(5'le 3'ün toplamını) yaz.", "arithmetic",
    ),
    "farkı": BuiltinDoc(
        "(bu değerle) (şu değerin) farkı", "İki sayının farkını hesaplar.",
        "(10'la 3'ün farkını) yaz.", "arithmetic",
    ),
    "çarpımı": BuiltinDoc(
        "(bu değerle) (şu değerin) çarpımı", "İki sayının çarpımını hesaplar.",
        "(6'yla 7'nin çarpımını) yaz.", "arithmetic",
    ),
    # Karşılaştırma
    "eşitliği": BuiltinDoc(
        "(bu değerle) (şu değerin) eşitliği",
        "İki değerin eşit olup olmadığını kontrol eder.",
        "(5'le 5'in eşitliği) doğruysa,", "comparison",
    ),
    "küçüklüğü": BuiltinDoc(
        "(bu değerle) (şu değerin) küçüklüğü",
        "İlk değerin ikinciden küçük olup olmadığını kontrol eder.",
        "(3'le 5'in küçüklüğü) doğruysa,", "comparison",
    ),
    "büyüklüğü": BuiltinDoc(
        "(bu değerle) (şu değerin) büyüklüğü",
        "İlk değerin ikinciden büyük olup olmadığını kontrol eder.",
        "(10'la 5'in büyüklüğü) doğruysa,", "comparison",
    ),
    # Dizge
    "uzunluğu": BuiltinDoc(
        "(dizgenin) uzunluğu", "Dizgenin karakter sayısını döndürür.",
        '("Merhaba"nın uzunluğunu) yaz.', "string",
    ),
    "birleşimi": BuiltinDoc(
        "(bu dizgeyle) (şu dizgenin) birleşimi", "İki dizgeyi birleştirir.",
        '("Merhaba "yla "Dünya"nın birleşimini) yaz.', "string",
    ),
    "tam-sayı-hali": BuiltinDoc(
        "(dizgenin) tam-sayı-hali",
        "Dizgeyi tam sayıya dönüştürür. Başarısızsa yokluk döner.",
        '("123"ün tam-sayı-hali)', "string",
    ),
    # Anahtar kelimeler
    "Bir": BuiltinDoc(
        "Bir tip-adı ...", "Yeni tip tanımı başlatır.",
        "Bir doğruluk ya doğru ya da yanlış olabilir.", "keyword",
    ),
    "ya": BuiltinDoc(
        "ya ... ya da ...", "Tip tanımında alternatif yapıcıları belirtir.",
        "Bir doğruluk ya doğru ya da yanlış olabilir.", "keyword",
    ),
    "da": BuiltinDoc(
        "ya ... ya da ...", '"ya ... da" yapısında "veya" anlamında kullanılır.',
        "ya boş ya da dolu olabilir.", "keyword",
    ),
    "olabilir": BuiltinDoc(
        "Bir tip ... olabilir.", "Tip tanımını sonlandırır.",
        "Bir doğruluk ya doğru ya da yanlış olabilir.", "keyword",
    ),
    "olsun": BuiltinDoc(
        "Bir yerleşik tip olsun.", "Yerleşik (primitive) tip tanımlar.",
        "Bir yerleşik tam-sayı olsun.", "keyword",
    ),
    "yerleşik": BuiltinDoc(
        "Bir yerleşik tip olsun.", "Yerleşik tip tanımında kullanılır.",
        "Bir yerleşik dizge olsun.", "keyword",
    ),
    "yerleşiktir": BuiltinDoc(
        "(parametreler) isim yerleşiktir.", "Gövdesi derleyicide olan fonksiyon bildirir.",
        "(bu tam-sayıyla) (şu tam-sayının) toplamı yerleşiktir.", "keyword",
    ),
    "var": BuiltinDoc(
        "Bir tip var olamaz.", "Boş (değersiz) tip tanımında kullanılır.",
        "Bir hiçlik var olamaz.", "keyword",
    ),
    "olamaz": BuiltinDoc(
        "Bir tip var olamaz.", "Boş tip tanımını sonlandırır.",
        "Bir hiçlik var olamaz.", "keyword",
    ),
    "diyelim": BuiltinDoc(
        "değere isim diyelim.", "Sabit tanımlar.",
        "sıfırın ardılına bir diyelim.", "keyword",
    ),
    "değilse": BuiltinDoc(
        "..., değilse, sonuç", "Örüntü eşleşmesinde diğer tüm durumları karşılar.",
        "bu doğruysa, 1, değilse, 0.", "keyword",
    ),
    # Tipler
    "tam-sayı": BuiltinDoc(
        "tam-sayı", "Yerleşik tam sayı tipi.", "(bu tam-sayıyı) fonksiyon,", "type",
    ),
    "dizge": BuiltinDoc(
        "dizge", "Yerleşik string tipi.", "(bu dizgeyi) fonksiyon,", "type",
    ),
    "doğruluk": BuiltinDoc(
        "doğruluk", "Boolean tipi (doğru/yanlış).",
        "Bir doğruluk ya doğru ya da yanlış olabilir.", "type",
    ),
    # Sabitler
    "doğru": BuiltinDoc("doğru", "Boolean doğru değeri.", "bu doğruysa,", "constant"),
    "yanlış": BuiltinDoc("yanlış", "Boolean yanlış değeri.", "yanlışsa,", "constant"),
    "boş": BuiltinDoc("boş", "Boş liste.", "liste boşsa,", "constant"),
    "yokluğu": BuiltinDoc(
        "yokluğu", "Olasılık tipinde değer yok durumu.", "değer yokluksa,", "constant",
    ),
    "durmak": BuiltinDoc(
        "durmak / durmaktır", "Fonksiyonu sonlandırır.", "durmaktır,", "constant",
    ),
}

BUILTIN_FUNCTIONS = frozenset(
    name for name, doc in BUILTINS.items()
    if doc.category in ("io", "arithmetic", "comparison", "string")
)

# Nomes (não palavras-chave) que o parser considera conhecidos desde o início
BUILTIN_NAMES = frozenset(
    name for name, doc in BUILTINS.items() if doc.category != "keyword"
)
