"""Word-form and stop-word tables for gloss normalization.

WORD_FORMS maps an English surface form to the gloss it is signed as:
- irregular and regular verb forms (ran, running -> run)
- slang and contractions (yeah -> yes, thankyou -> thank)
- plural -> singular pairs (people -> person)

STOP_WORDS are dropped entirely; they have no distinct sign.
"""

WORD_FORMS = {
    # Verb forms
    "running": "run", "ran": "run", "runs": "run",
    "walking": "walk", "walked": "walk", "walks": "walk",
    "going": "go", "went": "go", "goes": "go",
    "coming": "come", "came": "come", "comes": "come",
    "doing": "do", "done": "do",
    "saying": "say", "said": "say", "says": "say",
    "telling": "tell", "told": "tell", "tells": "tell",
    "seeing": "see", "saw": "see", "sees": "see",
    "looking": "look", "looked": "look", "looks": "look",
    "watching": "watch", "watched": "watch", "watches": "watch",
    "knowing": "know", "knew": "know", "knows": "know",
    "thinking": "think", "thought": "think", "thinks": "think",
    "feeling": "feel", "felt": "feel", "feels": "feel",
    "wanting": "want", "wanted": "want", "wants": "want",
    "needing": "need", "needed": "need", "needs": "need",
    "liking": "like", "liked": "like", "likes": "like",
    "loving": "love", "loved": "love", "loves": "love",
    "getting": "get", "got": "get", "gets": "get",
    "giving": "give", "gave": "give", "gives": "give",
    "taking": "take", "took": "take", "takes": "take",
    "making": "make", "made": "make", "makes": "make",

    # Common variations
    "yeah": "yes", "yep": "yes", "yup": "yes",
    "nope": "no", "nah": "no",
    "hi": "hello", "hey": "hello",
    "thanks": "thank", "thankyou": "thank", "thank-you": "thank",
    "welcome": "welcome",
    "okay": "ok", "ok": "ok",

    # Plural to singular
    "hands": "hand", "people": "person", "children": "child",
    "men": "man", "women": "woman", "friends": "friend",
    "families": "family", "things": "thing", "ways": "way",
    "places": "place", "parts": "part", "kinds": "kind",
    "sorts": "sort", "types": "type", "days": "day",
    "weeks": "week", "months": "month", "years": "year",
    "hours": "hour", "minutes": "minute", "seconds": "second",
    "countries": "country", "cities": "city", "homes": "home",
    "houses": "house", "schools": "school", "works": "work",
}

STOP_WORDS = frozenset({
    # articles
    "a", "an", "the",
    # prepositions
    "to", "of", "for", "with", "on", "at", "by", "from", "up", "about",
    "into", "through", "during",
    # conjunctions
    "and", "or", "but", "so", "if", "then", "than", "because",
    # be / have / do
    "is", "are", "was", "were", "be", "been", "being", "am",
    "have", "has", "had", "do", "does", "did",
    # modals
    "will", "would", "could", "should", "may", "might", "can",
    # demonstratives
    "this", "that", "these", "those",
    # degree adverbs
    "very", "really", "quite", "too", "also", "just", "only", "even",
    "still", "yet",
})
