from db.schemas import MedicineRecord

# Canned records returned when no Gemini credential is configured.

MOCK_IMAGE_RECORD = MedicineRecord(
    name="Biogesic (Mock)",
    generic_name="Paracetamol",
    overview="Biogesic is a trusted brand of paracetamol...",
    usage="Used for relief of minor aches and pains.",
    dosage="500mg every 4-6 hours",
    side_effects=["Nausea", "Skin rash"],
    contraindications=["Liver disease"],
    brand_names=["Biogesic"],
    confidence="high",
    disclaimer="MOCK DATA: Consult a professional.",
)

MOCK_TEXT_RECORD = MedicineRecord(
    name="Neozep (Mock)",
    generic_name="Phenylephrine HCl + Chlorphenamine Maleate + Paracetamol",
    overview=(
        "Neozep is used for the relief of clogged nose, runny nose, postnasal drip, itchy and watery eyes, "
        "sneezing, headache, body aches, and fever associated with the common cold, allergic rhinitis, "
        "sinusitis, flu, and other minor respiratory tract infections."
    ),
    usage="Relief of cold symptoms",
    dosage="Adults and children 12 years and older: 1 tablet every 6 hours",
    side_effects=["Drowsiness", "Dizziness"],
    contraindications=["High blood pressure", "Severe heart disease"],
    brand_names=["Neozep Forte", "Neozep Non-Drowsy"],
    confidence="high",
    disclaimer="MOCK DATA: Consult a professional.",
)
