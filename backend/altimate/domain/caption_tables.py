"""Lookup tables used by the caption generator.

Plain module-level data so they can be extended or tested in isolation:
- OBJECT_CATEGORIES: category -> known ImageNet labels
- KOREAN_TRANSLATIONS: label -> Korean display name
- CATEGORY_DESCRIPTIONS: category -> Korean category noun
- SINGLE_OBJECT_TEMPLATES: category -> fn(object_name, confidence) -> sentence
"""
from typing import Callable, Dict, List


UNKNOWN_CATEGORY = "unknown"

OBJECT_CATEGORIES: Dict[str, List[str]] = {
    "animals": [
        "golden_retriever",
        "Labrador_retriever",
        "beagle",
        "German_shepherd",
        "border_collie",
        "pug",
        "chihuahua",
        "tabby",
        "Persian_cat",
        "Siamese_cat",
        "tiger",
        "lion",
        "elephant",
        "giraffe",
        "zebra",
        "panda",
    ],
    "food": [
        "banana",
        "apple",
        "orange",
        "strawberry",
        "pizza",
        "hamburger",
        "hot_dog",
        "coffee_mug",
        "wine_bottle",
        "sandwich",
        "ice_cream",
    ],
    "vehicles": [
        "sports_car",
        "convertible",
        "limousine",
        "motorcycle",
        "bicycle",
        "school_bus",
        "truck",
        "airplane",
        "ship",
    ],
    "electronics": [
        "laptop",
        "desktop_computer",
        "cellular_telephone",
        "television",
        "radio",
        "computer_keyboard",
        "computer_mouse",
    ],
    "furniture": ["chair", "table", "bed", "sofa", "bookshelf", "lamp", "clock"],
    "clothing": ["suit", "dress", "jeans", "T-shirt", "sneakers", "hat"],
    "sports": [
        "tennis_ball",
        "basketball",
        "soccer_ball",
        "guitar",
        "piano",
        "violin",
    ],
}

KOREAN_TRANSLATIONS: Dict[str, str] = {
    # 동물
    "golden_retriever": "골든 리트리버",
    "Labrador_retriever": "래브라도 리트리버",
    "beagle": "비글",
    "German_shepherd": "저먼 셰퍼드",
    "border_collie": "보더 콜리",
    "pug": "퍼그",
    "chihuahua": "치와와",
    "tabby": "얼룩무늬 고양이",
    "Persian_cat": "페르시안 고양이",
    "Siamese_cat": "샴 고양이",
    "tiger": "호랑이",
    "lion": "사자",
    "elephant": "코끼리",
    "giraffe": "기린",
    "zebra": "얼룩말",
    "panda": "판다",
    # 음식
    "banana": "바나나",
    "apple": "사과",
    "orange": "오렌지",
    "strawberry": "딸기",
    "pizza": "피자",
    "hamburger": "햄버거",
    "hot_dog": "핫도그",
    "coffee_mug": "커피잔",
    "wine_bottle": "와인병",
    "sandwich": "샌드위치",
    "ice_cream": "아이스크림",
    # 전자기기
    "laptop": "노트북",
    "desktop_computer": "데스크톱 컴퓨터",
    "cellular_telephone": "스마트폰",
    "television": "텔레비전",
    "radio": "라디오",
    "computer_keyboard": "키보드",
    "computer_mouse": "마우스",
    # 차량
    "sports_car": "스포츠카",
    "convertible": "컨버터블",
    "motorcycle": "오토바이",
    "bicycle": "자전거",
    "school_bus": "스쿨버스",
    # 가구
    "chair": "의자",
    "table": "테이블",
    "bed": "침대",
    "sofa": "소파",
    "lamp": "램프",
    # 의류
    "suit": "정장",
    "dress": "드레스",
    "jeans": "청바지",
    "sneakers": "운동화",
    "hat": "모자",
}

CATEGORY_DESCRIPTIONS: Dict[str, str] = {
    "animals": "동물",
    "food": "음식",
    "vehicles": "차량",
    "electronics": "전자기기",
    "furniture": "가구",
    "clothing": "의류",
    "sports": "스포츠 용품",
}
DEFAULT_CATEGORY_DESCRIPTION = "객체"


def _animal_caption(obj: str, confidence: float) -> str:
    if confidence > 0.8:
        return f"귀여운 {obj}의 사진입니다"
    if confidence > 0.5:
        return f"{obj}로 보이는 동물이 있습니다"
    return f"{obj}와 비슷한 동물이 보입니다"


def _food_caption(obj: str, confidence: float) -> str:
    if confidence > 0.8:
        return f"맛있어 보이는 {obj}입니다"
    return f"{obj}로 보이는 음식이 있습니다"


def _electronics_caption(obj: str, confidence: float) -> str:
    return f"{obj}가 있는 모습입니다"


def _default_caption(obj: str, confidence: float) -> str:
    if confidence > 0.7:
        return f"사진에 {obj}가 보입니다"
    if confidence > 0.4:
        return f"{obj}로 보이는 객체가 있습니다"
    return f"{obj}와 비슷한 것이 보입니다"


SINGLE_OBJECT_TEMPLATES: Dict[str, Callable[[str, float], str]] = {
    "animals": _animal_caption,
    "food": _food_caption,
    "electronics": _electronics_caption,
    "default": _default_caption,
}


def primary_synonym(label: str) -> str:
    """'tiger, Panthera tigris' -> 'tiger' (Hugging Face id2label keeps the WordNet synonym list)."""
    return label.split(",", 1)[0].strip()


def normalize_label(label: str) -> str:
    """Key used for table lookups: ImageNet files spell 'golden retriever', tables use 'golden_retriever'."""
    return primary_synonym(label).replace(" ", "_").casefold()


def get_object_category(label: str) -> str:
    """First category listing the label wins; 'unknown' otherwise."""
    key = normalize_label(label)
    for category, labels in OBJECT_CATEGORIES.items():
        if label in labels or any(normalize_label(known) == key for known in labels):
            return category
    return UNKNOWN_CATEGORY


def get_korean_name(label: str) -> str:
    if label in KOREAN_TRANSLATIONS:
        return KOREAN_TRANSLATIONS[label]
    key = normalize_label(label)
    for known, korean in KOREAN_TRANSLATIONS.items():
        if normalize_label(known) == key:
            return korean
    return primary_synonym(label).replace("_", " ")


def get_category_description(category: str) -> str:
    return CATEGORY_DESCRIPTIONS.get(category, DEFAULT_CATEGORY_DESCRIPTION)


def get_single_object_template(category: str) -> Callable[[str, float], str]:
    return SINGLE_OBJECT_TEMPLATES.get(category, SINGLE_OBJECT_TEMPLATES["default"])
