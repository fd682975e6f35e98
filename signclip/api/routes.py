import logging

from fastapi import APIRouter, HTTPException

from signclip.nlp.captions import enhance_captions
from signclip.nlp.gloss import normalize
from signclip.pipeline.orchestrator import get_resolver, to_response
from signclip.schemas.messages import EnhanceIn, EnhanceOut, ResolveIn, ResolveOut, WordsIn

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api")


@router.get("/health")
async def health():
    resolver = get_resolver()
    return {
        "status": "ok",
        "message": "SignClip API is running",
        "vocabulary_size": len(resolver.index),
        "letters_available": len(resolver.letters),
    }


@router.post("/asl/video-map", response_model=ResolveOut)
async def video_map(body: ResolveIn):
    """Resolve caption text (or pre-split words) into a playable sign sequence."""
    if body.words is None and body.text is None:
        raise HTTPException(status_code=400, detail="Either 'text' or 'words' is required")

    result = get_resolver().resolve(words=body.words, text=body.text)
    if result.not_found_words:
        logger.info("No signs for: %s", ", ".join(result.not_found_words))
    return {
        "success": True,
        **to_response(result),
        "wordsFound": len(result.found_words),
        "wordsTotal": len(result.found_words) + len(result.not_found_words),
        "source": result.sources,
        "videoId": body.videoId,
    }


@router.post("/asl/words")
async def lookup_words(body: WordsIn):
    """Whole-word lookup only; no fingerspelling or fallbacks."""
    resolver = get_resolver()
    videos = []
    for word in body.words:
        gloss = normalize(word)
        ref = resolver.index.first(gloss) if gloss else None
        videos.append({
            "word": word.strip().lower(),
            "gloss": gloss,
            "videoUrl": resolver.index.url_for(gloss, ref) if ref else None,
            "hasVideo": ref is not None,
        })
    return {
        "success": True,
        "videos": videos,
        "totalWords": len(body.words),
        "foundVideos": sum(1 for v in videos if v["hasVideo"]),
    }


@router.get("/asl/letters")
async def available_letters():
    letters = get_resolver().letters.available_letters()
    return {"available": letters, "count": len(letters)}


@router.post("/captions/enhance", response_model=EnhanceOut)
def enhance(body: EnhanceIn):
    # sync: the LLM call blocks, so FastAPI runs this in its threadpool
    captions = [c if isinstance(c, str) else c.model_dump() for c in body.captions]
    out = enhance_captions(captions)
    return {
        "success": True,
        "originalCount": len(captions),
        "enhancedCount": len(out["captions"]),
        "enhancedCaptions": out["captions"],
        "mode": out["mode"],
        "videoId": body.videoId,
        "platform": body.platform,
    }
