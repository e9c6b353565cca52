"""
Pediatric knowledge base seed data.

A small, hand-curated subset used for development and tests.
In production the tables are populated by the content pipeline.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from medassist.schemas.knowledge import (
    DosageByAge,
    PediatricCondition,
    PediatricDrug,
    PediatricTopic,
)

if TYPE_CHECKING:
    from medassist.retrieval.store import InMemoryKnowledgeStore, PgKnowledgeStore


def get_pediatric_conditions() -> list[PediatricCondition]:
    return [
        PediatricCondition(
            id="cond_fever_without_source",
            title="Fever Without a Focus",
            category="Infectious Diseases",
            subcategory="Fever",
            description=(
                "Fever without localizing signs in young children. Most cases are "
                "self-limited viral infections, but infants under 3 months need "
                "evaluation for serious bacterial infection."
            ),
            symptoms=["fever", "irritability", "poor feeding", "lethargy"],
            diagnosis=(
                "Rectal temperature of 38.0 C or higher. Urinalysis and blood "
                "cultures depending on age and appearance."
            ),
            treatment=(
                "Antipyretics for comfort (acetaminophen or ibuprofen by weight), "
                "adequate fluids, and close follow-up. Empiric antibiotics for "
                "ill-appearing children or febrile infants under 28 days."
            ),
            prognosis="Excellent for self-limited viral illness.",
            age_groups=["newborn", "infant", "toddler"],
            icd_codes=["R50.9"],
            references=["Nelson Textbook of Pediatrics, Ch. 202"],
            chapter="Infectious Diseases",
            page_number=1384,
        ),
        PediatricCondition(
            id="cond_asthma",
            title="Asthma",
            category="Respiratory Disorders",
            description=(
                "Chronic inflammatory airway disease with reversible airflow "
                "obstruction and bronchial hyperresponsiveness."
            ),
            symptoms=["wheezing", "cough", "shortness of breath", "chest tightness"],
            diagnosis="Clinical history, spirometry with bronchodilator response in children over 5.",
            treatment=(
                "Short-acting beta agonists for relief, inhaled corticosteroids for "
                "persistent asthma, trigger avoidance and a written action plan."
            ),
            complications=["status asthmaticus"],
            age_groups=["preschool", "school", "adolescent"],
            icd_codes=["J45.909"],
            references=["Nelson Textbook of Pediatrics, Ch. 169"],
            chapter="Respiratory Disorders",
        ),
        PediatricCondition(
            id="cond_acute_otitis_media",
            title="Acute Otitis Media",
            category="Infectious Diseases",
            subcategory="Ear Infections",
            description="Acute infection of the middle ear, most common between 6 and 24 months.",
            symptoms=["ear pain", "fever", "irritability", "ear tugging"],
            diagnosis="Bulging tympanic membrane on otoscopy with acute onset of symptoms.",
            treatment=(
                "Analgesia, watchful waiting in selected children over 6 months, "
                "high-dose amoxicillin when antibiotics are indicated."
            ),
            age_groups=["infant", "toddler", "preschool"],
            icd_codes=["H66.90"],
            references=["Nelson Textbook of Pediatrics, Ch. 658"],
            chapter="The Ear",
        ),
        PediatricCondition(
            id="cond_gastroenteritis",
            title="Acute Gastroenteritis",
            category="Gastrointestinal Disorders",
            description="Infectious diarrhea with or without vomiting, usually viral.",
            symptoms=["diarrhea", "vomiting", "fever", "abdominal pain"],
            diagnosis="Clinical; assess degree of dehydration.",
            treatment=(
                "Oral rehydration solution for mild to moderate dehydration, "
                "continued feeding, intravenous fluids for severe dehydration."
            ),
            age_groups=["infant", "toddler", "preschool", "school"],
            icd_codes=["A09"],
            references=["Nelson Textbook of Pediatrics, Ch. 366"],
            chapter="Gastrointestinal Disorders",
        ),
        PediatricCondition(
            id="cond_neonatal_jaundice",
            title="Neonatal Jaundice",
            category="Neonatology",
            description="Yellow discoloration from elevated bilirubin in the first weeks of life.",
            symptoms=["jaundice", "poor feeding", "lethargy"],
            diagnosis="Total serum bilirubin plotted on an hour-specific nomogram.",
            treatment="Phototherapy based on risk thresholds, exchange transfusion when severe.",
            age_groups=["newborn"],
            icd_codes=["P59.9"],
            references=["Nelson Textbook of Pediatrics, Ch. 123"],
            chapter="The Fetus and the Neonatal Infant",
        ),
    ]


def get_pediatric_drugs() -> list[PediatricDrug]:
    return [
        PediatricDrug(
            id="drug_acetaminophen",
            name="Acetaminophen",
            generic_name="paracetamol",
            category="Analgesics",
            indications=["fever", "mild to moderate pain"],
            contraindications=["severe hepatic impairment"],
            dosage_pediatric="10-15 mg/kg every 4-6 hours, maximum 75 mg/kg/day",
            dosage_by_age=[
                DosageByAge(age_group="infant", dosage="10-15 mg/kg", route="oral", frequency="every 4-6 hours"),
                DosageByAge(age_group="toddler", dosage="10-15 mg/kg", route="oral", frequency="every 4-6 hours"),
            ],
            side_effects=["rash", "hepatotoxicity in overdose"],
            warnings=["Do not exceed 5 doses in 24 hours", "Check combination products for duplicate acetaminophen"],
            references=["Nelson Textbook of Pediatrics, Drug Formulary"],
        ),
        PediatricDrug(
            id="drug_ibuprofen",
            name="Ibuprofen",
            category="NSAIDs",
            indications=["fever", "pain", "inflammation"],
            contraindications=["age under 6 months", "dehydration", "renal impairment"],
            dosage_pediatric="5-10 mg/kg every 6-8 hours, maximum 40 mg/kg/day",
            dosage_by_age=[
                DosageByAge(age_group="toddler", dosage="5-10 mg/kg", route="oral", frequency="every 6-8 hours"),
            ],
            side_effects=["gastrointestinal upset"],
            warnings=["Avoid in dehydrated children", "Not for infants under 6 months"],
            interactions=["anticoagulants"],
            references=["Nelson Textbook of Pediatrics, Drug Formulary"],
        ),
        PediatricDrug(
            id="drug_amoxicillin",
            name="Amoxicillin",
            category="Antibiotics",
            indications=["acute otitis media", "streptococcal pharyngitis", "community-acquired pneumonia"],
            contraindications=["penicillin allergy"],
            dosage_pediatric="80-90 mg/kg/day divided twice daily for otitis media",
            side_effects=["diarrhea", "rash"],
            warnings=["Ask about penicillin allergy before prescribing"],
            references=["Nelson Textbook of Pediatrics, Drug Formulary"],
        ),
        PediatricDrug(
            id="drug_albuterol",
            name="Albuterol",
            generic_name="salbutamol",
            category="Bronchodilators",
            indications=["asthma", "bronchospasm"],
            contraindications=["hypersensitivity"],
            dosage_pediatric="2-4 puffs by MDI with spacer every 4-6 hours as needed",
            side_effects=["tremor", "tachycardia"],
            warnings=["Increasing use signals poor asthma control"],
            monitoring=["heart rate", "oxygen saturation"],
            references=["Nelson Textbook of Pediatrics, Ch. 169"],
        ),
    ]


def get_pediatric_topics() -> list[PediatricTopic]:
    return [
        PediatricTopic(
            id="topic_fever_management",
            title="Managing Fever in Children",
            category="Infectious Diseases",
            content=(
                "Fever is a normal response to infection and is not harmful by itself. "
                "Treatment aims at comfort rather than normal temperature. Weight-based "
                "acetaminophen or ibuprofen may be used; alternating them is not routinely "
                "recommended. Seek urgent care for infants under 3 months with fever, "
                "lethargy, signs of dehydration, or a non-blanching rash."
            ),
            key_points=[
                "Treat the child, not the number",
                "Dose antipyretics by weight",
                "Any fever under 3 months needs evaluation",
                "Watch for dehydration",
            ],
            related_conditions=["cond_fever_without_source"],
            related_drugs=["drug_acetaminophen", "drug_ibuprofen"],
            chapter="Infectious Diseases",
            section="Fever",
            tags=["fever", "antipyretics", "home care"],
            references=["Nelson Textbook of Pediatrics, Ch. 201"],
        ),
        PediatricTopic(
            id="topic_dehydration",
            title="Assessing Dehydration",
            category="Gastrointestinal Disorders",
            content=(
                "Dehydration is estimated clinically from capillary refill, skin turgor, "
                "respiratory pattern, mucous membranes and urine output. Mild to moderate "
                "dehydration is treated with oral rehydration solution in small frequent amounts."
            ),
            key_points=[
                "Capillary refill over 2 seconds suggests dehydration",
                "Oral rehydration works for most children",
                "Reduced wet diapers is an early sign",
            ],
            related_conditions=["cond_gastroenteritis"],
            chapter="Gastrointestinal Disorders",
            section="Fluids",
            tags=["dehydration", "fluids", "diarrhea"],
            references=["Nelson Textbook of Pediatrics, Ch. 70"],
        ),
        PediatricTopic(
            id="topic_milestones",
            title="Developmental Milestones",
            category="Growth and Development",
            content=(
                "Milestones in gross motor, fine motor, language and social domains give "
                "a framework for developmental surveillance at every well-child visit."
            ),
            key_points=[
                "Walks independently by 15 months",
                "Two-word phrases by 24 months",
                "Loss of skills at any age needs evaluation",
            ],
            chapter="Growth, Development, and Behavior",
            section="Surveillance",
            tags=["development", "milestones", "well-child"],
            references=["Nelson Textbook of Pediatrics, Ch. 22"],
        ),
    ]


def load_seed_records() -> tuple[
    list[PediatricCondition], list[PediatricDrug], list[PediatricTopic]
]:
    """All seed records, grouped by kind."""
    return get_pediatric_conditions(), get_pediatric_drugs(), get_pediatric_topics()


async def seed_knowledge_store(store: PgKnowledgeStore | InMemoryKnowledgeStore) -> int:
    """
    Create the schema and load the seed records.

    Returns:
        Number of records written
    """
    conditions, drugs, topics = load_seed_records()
    await store.create_schema()
    await store.insert_records(conditions, drugs, topics)
    return len(conditions) + len(drugs) + len(topics)
