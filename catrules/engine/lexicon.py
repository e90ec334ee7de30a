"""Word lists used by the feature extractor."""

STOPWORDS = frozenset(
    """
    a about above after again against all almost alone along already also although always am
    among an and another any anybody anyone anything anywhere are area areas aren't around as
    ask asked asking asks at away back backed backing backs be became because become becomes
    been before began behind being beings below best better between big both but by came can
    cannot can't case cases certain certainly clear clearly come could couldn't did didn't
    differ different differently do does doesn't doing done don't down downed downing downs
    during each early either end ended ending ends enough even evenly ever every everybody
    everyone everything everywhere face faces fact facts far felt few find finds first for four
    from full fully further furthered furthering furthers gave general generally get gets give
    given gives go going good goods got great greater greatest group grouped grouping groups had
    hadn't has hasn't have haven't having he he'd he'll her here here's hers herself he's high
    higher highest him himself his how however how's i i'd if i'll i'm important in interest
    interested interesting interests into is isn't it its it's itself i've just keep keeps kind
    knew know known knows large largely last later latest least less let lets let's like likely
    long longer longest made make making man many may me member members men might more most
    mostly mr mrs much must mustn't my myself necessary need needed needing needs never new newer
    newest next no nobody non noone nor not nothing now nowhere number numbers of off often old
    older oldest on once one only open opened opening opens or order ordered ordering orders
    other others ought our ours ourselves out over own part parted parting parts per perhaps
    place places point pointed pointing points possible present presented presenting presents
    problem problems put puts quite rather really right room rooms said same saw say says second
    seconds see seem seemed seeming seems sees several shall shan't she she'd she'll she's should
    shouldn't show showed showing shows side sides since small smaller smallest so some somebody
    someone something somewhere state states still such sure take taken than that that's the
    their theirs them themselves then there therefore there's these they they'd they'll they're
    they've thing things think thinks this those though thought thoughts three through thus to
    today together too took toward turn turned turning turns two under until up upon us use used
    uses very want wanted wanting wants was wasn't way ways we we'd well we'll wells went were
    we're weren't we've what what's when when's where where's whether which while who whole whom
    who's whose why why's will with within without won't work worked working works would wouldn't
    year years yet you you'd you'll young younger youngest your you're yours yourself yourselves
    you've
    """.split()
)

# Closed word classes. Anything outside these is treated as an open-class
# word (noun, verb or adjective) by the keyword tagger.
CLOSED_CLASS_WORDS = frozenset(
    """
    a an the this that these those some any each every either neither no
    i me my mine myself you your yours yourself yourselves he him his himself she her hers
    herself it its itself we us our ours ourselves they them their theirs themselves
    who whom whose which what whatever whoever whichever
    about above across after against along amid among around as at before behind below beneath
    beside besides between beyond by despite down during except for from in inside into like
    near of off on onto out outside over past per since than through throughout till to toward
    towards under underneath unlike until up upon via with within without
    and but or nor so yet although because though unless whereas while if whether once
    am is are was were be been being have has had having do does did doing
    can could may might must shall should will would ought
    not never very too also just only even quite rather really almost already always often
    sometimes usually here there where when why how then now thus hence however therefore
    one two three four five six seven eight nine ten first second third
    """.split()
)

ADJECTIVE_SUFFIXES = ("able", "ible", "ful", "ous", "ive", "less", "ish", "ical", "ic", "ary", "est")
VERB_SUFFIXES = ("ize", "ise", "ify", "ate", "ing", "ed")

# Common "-ly" adverbs. A closed list: "-ly" alone also ends nouns and
# adjectives such as family, supply, weekly and friendly.
ADVERBS = frozenset(
    """
    actually absolutely automatically barely briefly carefully certainly clearly closely
    completely constantly correctly currently deeply definitely directly easily
    entirely especially essentially eventually exactly extremely fairly finally firmly
    frequently fully generally gently gradually greatly hardly highly honestly immediately
    increasingly initially instantly largely lately literally mainly merely mostly nearly
    necessarily newly normally obviously occasionally officially only openly originally
    particularly partly perfectly personally possibly potentially previously primarily
    probably properly quickly quietly rapidly rarely readily recently regularly relatively
    reportedly roughly safely seriously shortly significantly similarly simply slightly
    slowly smoothly specifically steadily strictly strongly successfully suddenly surely
    totally truly typically ultimately unfortunately usually virtually widely
    """.split()
)

# Ordered: the first group whose phrase appears in the text wins.
CONTENT_TYPE_PHRASES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("tutorial", ("how to", "tutorial", "guide")),
    ("news", ("news", "breaking", "announcement")),
    ("review", ("review", "rating", "opinion")),
    ("analysis", ("analysis", "research", "study")),
    ("interview", ("interview", "q&a", "conversation")),
)

POSITIVE_WORDS = frozenset(["good", "great", "excellent", "amazing", "wonderful", "best", "love", "like"])
NEGATIVE_WORDS = frozenset(["bad", "terrible", "awful", "worst", "hate", "dislike", "poor"])

ENGLISH_FUNCTION_WORDS = frozenset(["the", "and", "or", "but", "in", "on", "at", "to", "for"])
INDONESIAN_FUNCTION_WORDS = frozenset(["dan", "atau", "tetapi", "di", "ke", "dari", "untuk", "dengan"])
