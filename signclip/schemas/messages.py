from pydantic import BaseModel
from typing import List, Literal, Optional, Union

# ── HTTP ───────────────────────────────────────────────────────────────────

class ResolveIn(BaseModel):
    text: Optional[str] = None
    words: Optional[List[str]] = None
    videoId: Optional[str] = None

class SequenceItemOut(BaseModel):
    type: Literal["video", "image"]
    url: str
    word: str
    gloss: str
    source: str

class ResolveOut(BaseModel):
    success: bool = True
    sequence: List[SequenceItemOut]
    foundWords: List[str]
    notFoundWords: List[str]
    wordsFound: int
    wordsTotal: int
    source: List[str]
    videoId: Optional[str] = None

class WordsIn(BaseModel):
    words: List[str]

class CaptionIn(BaseModel):
    text: str = ""
    start: Optional[float] = None
    end: Optional[float] = None

class EnhanceIn(BaseModel):
    captions: List[Union[str, CaptionIn]]
    videoId: Optional[str] = None
    platform: Optional[str] = None

class EnhancedCaptionOut(BaseModel):
    text: str
    start: float
    end: float
    original: str

class EnhanceOut(BaseModel):
    success: bool = True
    originalCount: int
    enhancedCount: int
    enhancedCaptions: List[EnhancedCaptionOut]
    mode: Literal["basic", "llm"]
    videoId: Optional[str] = None
    platform: Optional[str] = None

# ── WebSocket ──────────────────────────────────────────────────────────────

class CaptionMessageIn(BaseModel):
    type: Literal["caption"]
    session: str
    ts: int
    text: str

class SequenceMessageOut(BaseModel):
    type: Literal["sequence"]
    session: str
    ts: int
    sequence: List[SequenceItemOut]
    foundWords: List[str]
    notFoundWords: List[str]
