from django.db import migrations

# Weighted, storage-maintained search vector. PostgreSQL only: other engines
# (SQLite in local tests) do not get the column.
ADD_TEXT_SEARCHABLE = (
    """
    ALTER TABLE patients
        ADD COLUMN IF NOT EXISTS text_searchable tsvector
        GENERATED ALWAYS AS (
            setweight(to_tsvector('simple', coalesce(personal_id_id, '')), 'A') ||
            setweight(to_tsvector('simple', coalesce(phone_number, '')), 'A') ||
            setweight(to_tsvector('simple', coalesce(name, '')), 'B') ||
            setweight(to_tsvector('simple', coalesce(special_note, '')), 'C') ||
            setweight(to_tsvector('simple', coalesce(referred_by, '')), 'D')
        ) STORED
    """,
    "CREATE INDEX IF NOT EXISTS patients_text_searchable_idx ON patients USING GIN (text_searchable)",
)

DROP_TEXT_SEARCHABLE = (
    "DROP INDEX IF EXISTS patients_text_searchable_idx",
    "ALTER TABLE patients DROP COLUMN IF EXISTS text_searchable",
)


def _on_postgresql(statements):
    def run(apps, schema_editor):
        if schema_editor.connection.vendor != "postgresql":
            return
        for statement in statements:
            schema_editor.execute(statement)

    return run


class Migration(migrations.Migration):

    dependencies = [
        ("patients", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(
            _on_postgresql(ADD_TEXT_SEARCHABLE),
            _on_postgresql(DROP_TEXT_SEARCHABLE),
        ),
    ]
