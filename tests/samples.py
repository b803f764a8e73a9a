"""Canned model completions shared by the tests."""

import json

import httpx


def chat_response(content, status_code=200):
    return httpx.Response(
        status_code,
        json={"choices": [{"message": {"role": "assistant", "content": content}}]},
    )


def request_json(request):
    return json.loads(request.content.decode("utf-8"))


MINIMAL_COMPLETION = '{"chiefComplaint":{"complaint":"fever and cough","duration":"3 days"},"patient":{}}'

FULL_COMPLETION = """
{
  "patient": {"fullName": "Doe, John", "age": "45 years old", "gender": "male",
              "occupation": "accountant", "maritalStatus": "married",
              "dateOfVisit": "2025-10-07", "sourceOfHistory": "patient"},
  "chiefComplaint": {"complaint": "fever and cough", "duration": "3 days"},
  "historyOfPresentIllness": {
    "onset": "gradual", "site": null, "character": "dry cough", "radiation": "none",
    "associatedSymptoms": "sore throat, fatigue", "timing": "worse at night",
    "exacerbatingFactors": null, "relievingFactors": ["rest"],
    "severity": "moderate",
    "chronologicalNarrative": "Started on Monday with a sore throat, then fever, then cough."
  },
  "reviewOfSystems": {"general": "fatigue", "respiratory": ["cough", "none"]},
  "pastMedicalHistory": {"chronicDiseases": "diabetes, hypertension", "allergies": "n/a",
                         "surgeries": "appendectomy"},
  "medications": {"current": [{"name": "Metformin", "dose": "500 mg", "frequency": "twice daily"}],
                  "supplements": "vitamin d"},
  "familyHistory": {"diseases": "hypertension"},
  "socialHistory": {"smoking": "no", "alcohol": true, "diet": "vegetarian, low salt", "drugs": "none"},
  "preventiveCare": {"immunizations": [], "screeningTests": null},
  "assessment": {"summary": true, "differentialDiagnoses": "viral URI, influenza"},
  "plan": {"investigations": "CBC", "treatment": ["paracetamol"], "followUp": "in 1 week, or sooner if worse"}
}
"""
