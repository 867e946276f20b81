"""
Seed content for the guides and projects collections.

Used to populate a fresh store for development and demos. In
production, content is authored through the admin pages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from wiki_search.corpus.indexing import SeedReport, seed_collection

if TYPE_CHECKING:
    from wiki_search.core.protocols import DocumentStore, EmbeddingProvider

GUIDES_COLLECTION = "guides"
PROJECTS_COLLECTION = "projects"


def get_seed_guides() -> list[dict[str, Any]]:
    """Seed guides, one per category of the wiki."""
    return [
        {
            "title": "Hvordan lage en effektiv PowerPoint-presentasjon",
            "slug": "effektiv-powerpoint-presentasjon",
            "description": "En steg-for-steg guide for å lage en profesjonell og engasjerende PowerPoint-presentasjon.",
            "category": "Kommunikasjon og merkevare",
            "content": """## 1. Velg et profesjonelt design

Bruk nøytrale bakgrunner og et konsekvent oppsett gjennom hele presentasjonen.

## 2. Strukturér innholdet

- Introduksjon
- Hoveddel
- Konklusjon

## 3. Øv på presentasjonen

Test teknisk utstyr og presentasjonsmodus i god tid før fremføring.""",
        },
        {
            "title": "Hvordan lage wireframes",
            "slug": "lage-wireframes",
            "description": "En steg-for-steg guide for wireframing i produktdesign.",
            "category": "Produkt- og tjenestedesign",
            "content": """## Hva er en wireframe?

Wireframes er enkle skisser av en nettside eller app. De hjelper deg med å
planlegge layout og struktur uten distraksjon fra farger eller detaljer.

## Verktøy

- Figma
- Balsamiq
- Penn og papir""",
        },
        {
            "title": "Hvordan skrive en god spørreundersøkelse",
            "slug": "sporreundersokelse-guide",
            "description": "Tips og triks for å lage effektive spørreundersøkelser.",
            "category": "Data og analyse",
            "content": """## Hva gjør en undersøkelse god?

Korte, tydelige spørsmål med ett tema om gangen. Unngå ledende formuleringer
og test undersøkelsen på noen få personer før utsending.""",
        },
        {
            "title": "Hva er GDPR og hvorfor er det viktig?",
            "slug": "gdpr-personvern",
            "description": "Alt du trenger å vite om personvern og etikk i datahåndtering.",
            "category": "Etikk",
            "content": """## GDPR kort forklart

GDPR regulerer hvordan personopplysninger samles inn, lagres og brukes.
Samle bare inn det du trenger, og vær åpen om hvorfor.""",
        },
        {
            "title": "Skissering og prototyping for nye tjenester",
            "slug": "skissering-prototyping",
            "description": "Bruk skisser og prototyper for å teste ideer raskt.",
            "category": "Produkt- og tjenestedesign",
            "content": """## Hvorfor skissere?

Skisser gjør ideer konkrete og billige å forkaste. Prototyper lar brukere
teste flyten før noe blir utviklet.""",
        },
        {
            "title": "Digital transformasjon i praksis",
            "slug": "digital-transformasjon",
            "description": "Hvordan bedrifter kan modernisere seg gjennom teknologi.",
            "category": "Digital transformasjon",
            "content": """## Hva er digital transformasjon?

Å endre arbeidsprosesser og tjenester med teknologi, ikke bare digitalisere
eksisterende skjemaer. Start med brukernes behov.""",
        },
        {
            "title": "Grunnprinsipper for bærekraftige prosjekter",
            "slug": "baerekraftige-prosjekter",
            "description": "Hvordan integrere bærekraft i prosjektarbeid.",
            "category": "Bærekraft og miljøprosjekter",
            "content": """## Bærekraft = mer enn miljø

Bærekraft omfatter miljø, økonomi og sosiale forhold. Sett mål for alle tre
tidlig i prosjektet og følg dem opp.""",
        },
        {
            "title": "Lag en markedsstrategi fra bunnen av",
            "slug": "markedsstrategi-nybegynner",
            "description": "Fra målgruppe til kanaler og budskap – alt du trenger.",
            "category": "Markedsanalyse og strategi",
            "content": """## Før du begynner

Definer målgruppen, finn ut hvor den er, og lag et budskap som treffer.
Mål effekten og juster underveis.""",
        },
        {
            "title": "Brukerreise og touchpoints forklart",
            "slug": "brukerreise-touchpoints",
            "description": "Kartlegg kundereisen og forbedre opplevelsen.",
            "category": "Kommunikasjon og merkevare",
            "content": """## Hva er en brukerreise?

En brukerreise beskriver hvert steg en kunde går gjennom, fra første kontakt
til etter kjøpet. Hvert møtepunkt er en mulighet til forbedring.""",
        },
        {
            "title": "Fra idé til forretningsmodell",
            "slug": "forretningsutvikling-idetilmodell",
            "description": "Hvordan du går fra idé til faktisk verdi for brukere.",
            "category": "Forretningsutvikling",
            "content": """## Start med problemet

En god forretningsmodell løser et reelt problem. Test antakelsene dine med
potensielle kunder før du bygger.""",
        },
        {
            "title": "Hvordan bruke data til innsikt",
            "slug": "data-analyse-innsikt",
            "description": "Fra rådata til beslutningsgrunnlag – steg for steg.",
            "category": "Data og analyse",
            "content": """## Data er kun nyttig med kontekst

1. Samle inn relevante data
2. Visualiser i dashboards
3. Tolk og del funn

> Husk: Ikke alt som kan måles er viktig.""",
        },
    ]


def get_seed_projects() -> list[dict[str, Any]]:
    """Seed projects for the projects wiki."""
    return [
        {
            "title": "Redesign av internportal",
            "slug": "internportal-redesign",
            "description": "Et prosjekt for å forbedre brukeropplevelsen i en internportal for ansatte.",
            "category": "UX-prosjekter",
            "content": """## Om prosjektet

Målet var å redesigne en internportal brukt av ansatte for å finne ressurser,
nyheter og verktøy.

### Prosess

- Kartla eksisterende brukerreise
- Gjennomførte intervjuer og spørreundersøkelser
- Laget prototyper i Figma""",
        },
        {
            "title": "Pilotprosjekt med bærekraftsindikatorer",
            "slug": "baerekraft-indikatorer-pilot",
            "description": "Et pilotprosjekt for å teste visuelle indikatorer på bærekraft.",
            "category": "Bærekraftige prosjekter",
            "content": """## Hva gjorde vi?

Vi testet hvordan fargekoding og symboler kunne hjelpe brukere å forstå
miljøpåvirkningen til produkter.

### Metode

- Utviklet indikatorer basert på Svanemerket og EUs taksonomi
- Brukertestet prototype med 15 personer""",
        },
    ]


def seed_content(
    store: DocumentStore,
    embeddings: EmbeddingProvider,
    collections: tuple[str, ...] = (GUIDES_COLLECTION, PROJECTS_COLLECTION),
) -> list[SeedReport]:
    """
    Seed the requested collections.

    Works with any DocumentStore implementation; existing slugs are skipped,
    so running it twice is harmless.
    """
    sources = {
        GUIDES_COLLECTION: get_seed_guides,
        PROJECTS_COLLECTION: get_seed_projects,
    }
    unknown = [c for c in collections if c not in sources]
    if unknown:
        raise ValueError(f"No seed content for: {', '.join(unknown)}")

    return [
        seed_collection(store, embeddings, collection, sources[collection]())
        for collection in collections
    ]
