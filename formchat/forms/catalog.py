"""Hardcoded form catalog.

Defines the three built-in forms and the question table used to ask for
their fields. Questions are looked up by (field, form type) first, then
by field alone.
"""

from formchat.forms.models import FieldDef, FieldType, FormSchema, FormType

FORM_DEFINITIONS: dict[FormType, dict[str, object]] = {
    FormType.CHANGE_OF_MAJOR: {
        "name": "Change of Major",
        "description": "Request to change your academic major",
        "required": [
            "studentName",
            "studentId",
            "currentMajor",
            "desiredMajor",
            "advisorName",
            "department",
            "email",
        ],
        "optional": ["phone", "reason"],
    },
    FormType.GRADUATION_APPLICATION: {
        "name": "Graduation Application",
        "description": "Apply for graduation",
        "required": [
            "studentName",
            "studentId",
            "expectedGraduationDate",
            "degreeType",
            "major",
            "advisorName",
            "department",
            "email",
        ],
        "optional": ["phone", "minor", "honorsProgram", "thesisTitle"],
    },
    FormType.ADD_DROP_COURSE: {
        "name": "Add/Drop Course",
        "description": "Add or drop courses for a semester",
        "required": ["studentName", "studentId", "semester", "year", "email"],
        "optional": ["phone", "coursesToAdd", "coursesToDrop", "reason", "advisorName"],
    },
}

FIELD_LABELS: dict[str, str] = {
    "studentName": "Student Name",
    "studentId": "Student ID",
    "email": "Email",
    "phone": "Phone",
    "currentMajor": "Current Major",
    "desiredMajor": "Desired Major",
    "advisorName": "Advisor Name",
    "department": "Department",
    "reason": "Reason",
    "expectedGraduationDate": "Expected Graduation Date",
    "degreeType": "Degree Type",
    "major": "Major",
    "minor": "Minor",
    "honorsProgram": "Honors Program",
    "thesisTitle": "Thesis Title",
    "semester": "Semester",
    "year": "Year",
    "coursesToAdd": "Courses to Add",
    "coursesToDrop": "Courses to Drop",
}

FIELD_TYPES: dict[str, FieldType] = {
    "email": FieldType.EMAIL,
    "phone": FieldType.PHONE,
    "reason": FieldType.TEXTAREA,
    "expectedGraduationDate": FieldType.DATE,
    "degreeType": FieldType.SELECT,
    "honorsProgram": FieldType.CHECKBOX,
    "semester": FieldType.SELECT,
    "year": FieldType.NUMBER,
    "coursesToAdd": FieldType.LIST,
    "coursesToDrop": FieldType.LIST,
}

# Per-field questions, used unless a form-specific one exists
DEFAULT_QUESTIONS: dict[str, str] = {
    "studentName": "What is your full name?",
    "studentId": "What is your student ID number?",
    "email": "What email address should we use to contact you?",
    "phone": "What phone number can we reach you at?",
    "currentMajor": "What is your current major?",
    "desiredMajor": "Which major would you like to switch to?",
    "advisorName": "Who is your academic advisor?",
    "department": "Which department does this request go to?",
    "reason": "Could you briefly tell me the reason for this request?",
    "expectedGraduationDate": "When do you expect to graduate?",
    "degreeType": "What type of degree are you completing (for example, Bachelor's or Master's)?",
    "major": "What is your major?",
    "minor": "Do you have a minor? If so, which one?",
    "honorsProgram": "Are you part of the honors program?",
    "thesisTitle": "What is the title of your thesis?",
    "semester": "Which semester is this for (Fall, Spring or Summer)?",
    "year": "Which year is this for?",
    "coursesToAdd": "Which courses would you like to add?",
    "coursesToDrop": "Which courses would you like to drop?",
}

FORM_QUESTIONS: dict[tuple[str, FormType], str] = {
    ("department", FormType.CHANGE_OF_MAJOR): (
        "Which department offers the major you want to switch to?"
    ),
    ("advisorName", FormType.CHANGE_OF_MAJOR): (
        "Who is your current academic advisor?"
    ),
    ("reason", FormType.CHANGE_OF_MAJOR): (
        "What's your reason for changing majors?"
    ),
    ("department", FormType.GRADUATION_APPLICATION): (
        "Which department is your major in?"
    ),
    ("advisorName", FormType.GRADUATION_APPLICATION): (
        "Who is your advisor for graduation clearance?"
    ),
    ("reason", FormType.ADD_DROP_COURSE): (
        "Why are you adding or dropping these courses?"
    ),
    ("advisorName", FormType.ADD_DROP_COURSE): (
        "Who is your advisor approving this change?"
    ),
}


def hardcoded_question(field_name: str, form_type: FormType) -> str | None:
    """Look up the question for a field of a hardcoded form."""
    return FORM_QUESTIONS.get((field_name, form_type)) or DEFAULT_QUESTIONS.get(field_name)


def _build_schema(form_type: FormType) -> FormSchema:
    definition = FORM_DEFINITIONS[form_type]
    required: list[str] = list(definition["required"])  # type: ignore[call-overload]
    optional: list[str] = list(definition["optional"])  # type: ignore[call-overload]

    fields = [
        FieldDef(
            name=name,
            label=FIELD_LABELS.get(name, name),
            type=FIELD_TYPES.get(name, FieldType.TEXT),
            required=name in required,
            question=hardcoded_question(name, form_type),
        )
        for name in required + optional
    ]
    return FormSchema(
        id=form_type.value,
        name=str(definition["name"]),
        description=str(definition["description"]),
        fields=fields,
        required_fields=required,
        optional_fields=optional,
    )


HARDCODED_SCHEMAS: dict[FormType, FormSchema] = {
    form_type: _build_schema(form_type) for form_type in FormType
}
