import pytest

from secrets_console.page.form import SecretFormInput, SecretFormValues


@pytest.fixture
def submitted():
    return []


@pytest.fixture
def form(submitted):
    async def on_submit(values):
        submitted.append(values)
        return "created"

    return SecretFormInput(on_submit=on_submit)


@pytest.mark.asyncio
async def test_submit_passes_values_then_resets(form, submitted):
    form.open()
    form.fill(name="db-pass", description="prod db", secret_value="s3cr3t")

    result = await form.submit()

    assert result == "created"
    assert submitted == [
        SecretFormValues(name="db-pass", description="prod db", secret_value="s3cr3t")
    ]
    assert form.is_open is False
    assert (form.name, form.description, form.secret_value) == ("", "", "")


def test_cancel_closes_without_submitting(form, submitted):
    form.open()
    form.fill(name="draft", description="", secret_value="x")

    form.cancel()

    assert form.is_open is False
    assert submitted == []
    assert form.name == "draft"
