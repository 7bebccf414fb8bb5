"""
Canonical categories and the keyword vocabularies that feed them.

Everything here is read-only reference data.  The classifiers in
services/classification/ evaluate these tables in order; the rate table in
services/compensation/rate_table.py is keyed by the enums below.

Keywords are written already normalized (see services/classification/text.py):
lowercase, no accents, punctuation collapsed to single spaces.
"""

import enum


class MacroRegion(str, enum.Enum):
    CAPITAL = "CAPITAL"  # São Paulo city
    GRANDE_SP = "GRANDE_SP"  # metro-area satellite municipalities
    INTERIOR = "INTERIOR"  # rest of SP state
    OUTROS_ESTADOS = "OUTROS_ESTADOS"


class TypeCategory(str, enum.Enum):
    ANTENISTA = "ANTENISTA"
    ROUBO_FURTO = "ROUBO_FURTO"
    SUSPEITA = "SUSPEITA"
    PRESERVACAO = "PRESERVACAO"
    APROPRIACAO = "APROPRIACAO"
    SIMPLES_VERIFICACAO = "SIMPLES_VERIFICACAO"
    OUTRO = "OUTRO"


class OutcomeBucket(str, enum.Enum):
    RECUPERADO = "RECUPERADO"
    NAO_RECUPERADO = "NAO_RECUPERADO"
    LOCALIZADO = "LOCALIZADO"
    CANCELADO = "CANCELADO"
    EM_ANDAMENTO = "EM_ANDAMENTO"
    OUTRO = "OUTRO"


# Region groupings used by the rate table.
SAO_PAULO_METRO: frozenset[MacroRegion] = frozenset(
    {MacroRegion.CAPITAL, MacroRegion.GRANDE_SP}
)
OUTSIDE_METRO: frozenset[MacroRegion] = frozenset(
    {MacroRegion.INTERIOR, MacroRegion.OUTROS_ESTADOS}
)


# ── States ────────────────────────────────────────────────────────────────────
# Full state name -> UF.  Two-letter codes pass through unchanged.

STATE_CODES: dict[str, str] = {
    "acre": "AC",
    "alagoas": "AL",
    "amapa": "AP",
    "amazonas": "AM",
    "bahia": "BA",
    "ceara": "CE",
    "distrito federal": "DF",
    "espirito santo": "ES",
    "goias": "GO",
    "maranhao": "MA",
    "mato grosso": "MT",
    "mato grosso do sul": "MS",
    "minas gerais": "MG",
    "para": "PA",
    "paraiba": "PB",
    "parana": "PR",
    "pernambuco": "PE",
    "piaui": "PI",
    "rio de janeiro": "RJ",
    "rio grande do norte": "RN",
    "rio grande do sul": "RS",
    "rondonia": "RO",
    "roraima": "RR",
    "santa catarina": "SC",
    "sao paulo": "SP",
    "sergipe": "SE",
    "tocantins": "TO",
}

CAPITAL_CITY_KEYWORD = "sao paulo"

# Greater São Paulo municipalities (plus the Guaianases district, which the
# operators record as a city).  Matched by containment.
GRANDE_SP_CITIES: tuple[str, ...] = (
    "aruja",
    "barueri",
    "biritiba mirim",
    "caieiras",
    "cajamar",
    "carapicuiba",
    "cotia",
    "diadema",
    "embu guacu",
    "embu das artes",
    "ferraz de vasconcelos",
    "francisco morato",
    "franco da rocha",
    "guarulhos",
    "guaianases",
    "itapecerica da serra",
    "itapevi",
    "itaquaquecetuba",
    "jandira",
    "juquitiba",
    "mairipora",
    "maua",
    "mogi das cruzes",
    "osasco",
    "poa",
    "ribeirao pires",
    "rio grande da serra",
    "santa isabel",
    "santana de parnaiba",
    "santo andre",
    "sao bernardo",
    "sao caetano",
    "suzano",
    "taboao da serra",
    "vargem grande paulista",
)


# ── Occurrence types ──────────────────────────────────────────────────────────
# Evaluated top to bottom, first hit wins.  Order matters: "antenista" labels
# usually also mention roubo/furto.

TYPE_KEYWORDS: tuple[tuple[tuple[str, ...], TypeCategory], ...] = (
    (("antenista",), TypeCategory.ANTENISTA),
    (("roubo", "furto"), TypeCategory.ROUBO_FURTO),
    (("suspeita",), TypeCategory.SUSPEITA),
    (("preserva",), TypeCategory.PRESERVACAO),
    (("apropria",), TypeCategory.APROPRIACAO),
    (("simples verific",), TypeCategory.SIMPLES_VERIFICACAO),
)


# ── Outcomes ──────────────────────────────────────────────────────────────────
# "nao recuperado" must be tested before "recuperado".

OUTCOME_KEYWORDS: tuple[tuple[tuple[str, ...], OutcomeBucket], ...] = (
    (("nao recuperado",), OutcomeBucket.NAO_RECUPERADO),
    (("recuperado", "concluida", "concluido"), OutcomeBucket.RECUPERADO),
    (("localizado",), OutcomeBucket.LOCALIZADO),
    (("cancelado",), OutcomeBucket.CANCELADO),
    (("em andamento",), OutcomeBucket.EM_ANDAMENTO),
)
