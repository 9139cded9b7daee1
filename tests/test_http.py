"""
Testes dos fluxos HTTP: web pública, painel administrativo e API JSON.
"""
from nurse_funnel.core.errors import PersistenceError


def submit(client, plan_id="inversion-compartida-aurora", name="Maria", email="maria@example.com", **extra):
    data = {"plan_id": plan_id, "name": name, "email": email}
    data.update(extra)
    return client.post("/solicitud", data=data)


# ============================================================================
# Web pública
# ============================================================================

def test_index_lists_plans(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "X-Request-ID" in response.headers
    assert "Financiación Total" in response.text
    assert "Modalidad Fiordo" in response.text
    assert "Inversión Completa" in response.text
    assert "https://calendly.com/amanda-globalworking" in response.text
    assert "visitor_id" in response.cookies


def test_lead_form_for_fiordo(client):
    response = client.get("/solicitud", params={"plan": "inversion-compartida-fiordo"})

    assert response.status_code == 200
    assert "Da el paso a la Modalidad Fiordo" in response.text
    assert "375€/mes" in response.text
    assert "en los 4 primeros meses del Programa" in response.text


def test_lead_form_for_complete_investment_shows_payment_choice(client):
    response = client.get(
        "/solicitud",
        params={"plan": "inversion-completa", "metodo": "financing", "pagos": 24},
    )

    assert response.status_code == 200
    assert "Con financiación" in response.text
    assert 'name="installments" value="24"' in response.text


def test_unknown_plan_is_404(client):
    assert client.get("/solicitud", params={"plan": "no-existe"}).status_code == 404
    assert submit(client, plan_id="no-existe").status_code == 404


def test_submit_lead_redirects_with_notice(client):
    response = submit(client)

    assert response.status_code == 200
    assert response.history[0].status_code == 303
    assert "¡Solicitud enviada!" in response.text

    records = client.app.state.engine.list_registrations()
    assert len(records) == 1
    assert records[0].plan_title == "Inversión Compartida - Modalidad Aurora"
    assert records[0].monthly_payment == 125
    assert records[0].amortization_months == 16
    assert records[0].payment_method == "N/A"

    # O aviso aparece uma única vez
    assert "¡Solicitud enviada!" not in client.get("/").text


def test_submit_complete_investment_with_financing(client):
    submit(client, plan_id="inversion-completa", payment_method="financing", installments="24")

    record = client.app.state.engine.list_registrations()[0]
    assert record.plan_title == "Inversión Completa"
    assert record.monthly_payment == 1325
    assert record.amortization_months == 0
    assert record.payment_method == "Con financiación"
    assert record.number_of_installments == 24


def test_submit_with_blank_name_keeps_form(client):
    response = submit(client, name="   ", email="maria@example.com")

    assert response.status_code == 422
    assert "Por favor completa todos los campos" in response.text
    assert 'value="maria@example.com"' in response.text
    assert client.app.state.engine.list_registrations() == []


def test_submit_database_failure_shows_retry_message(client, monkeypatch):
    def fail(*args, **kwargs):
        raise PersistenceError("No se pudo enviar la solicitud. Inténtalo de nuevo.")

    monkeypatch.setattr(client.app.state.engine, "submit_lead", fail)
    response = submit(client)

    assert response.status_code == 503
    assert "No se pudo enviar la solicitud" in response.text


# ============================================================================
# Painel administrativo (HTML)
# ============================================================================

def test_admin_without_registrations(client):
    response = client.get("/admin")
    assert response.status_code == 200
    assert "Sin datos de registros" in response.text


def test_admin_projection_page(client):
    submit(client, name="Ana", email="ana@example.com")
    submit(client, name="Luis", email="luis@example.com")

    response = client.get("/admin")

    assert response.status_code == 200
    assert "Resumen Global (12 Meses)" in response.text
    # ativo: 12 × 125€; abandono: 6 × 420€
    assert "4.020€" in response.text
    assert "Mes 12" in response.text


def test_admin_registrations_page_and_filter(client):
    submit(client, name="Ana", email="ana@example.com")
    submit(client, plan_id="financiacion-total", name="Luis", email="luis@example.com")

    response = client.get("/admin/registrations")
    assert response.status_code == 200
    assert "ana@example.com" in response.text
    assert "luis@example.com" in response.text
    assert "30 meses" in response.text

    filtered = client.get("/admin/registrations", params={"plan": "Financiación Total"})
    assert "luis@example.com" in filtered.text
    assert "ana@example.com" not in filtered.text


def test_admin_delete_requires_confirmation(client):
    submit(client)

    response = client.post("/admin/registrations/delete", data={})
    assert "Eliminación cancelada" in response.text
    assert len(client.app.state.engine.list_registrations()) == 1

    response = client.post("/admin/registrations/delete", data={"confirm": "yes"})
    assert "Registros eliminados" in response.text
    assert client.app.state.engine.list_registrations() == []


def test_admin_requires_credentials_when_key_is_set(secured_client):
    response = secured_client.get("/admin")
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Basic"

    assert secured_client.get("/admin", auth=("admin", "wrong")).status_code == 401
    assert secured_client.get("/admin", auth=("admin", "secret")).status_code == 200
    assert secured_client.get("/admin/registrations", auth=("admin", "secret")).status_code == 200

    # A web pública continua aberta
    assert secured_client.get("/").status_code == 200


# ============================================================================
# API JSON
# ============================================================================

def test_api_registrations_and_statistics(client):
    submit(client, name="Ana", email="ana@example.com")
    submit(client, name="Eva", email="eva@example.com")
    submit(client, plan_id="financiacion-total", name="Luis", email="luis@example.com")

    registrations = client.get("/api/registrations").json()
    assert len(registrations) == 3
    assert {r["email"] for r in registrations} == {"ana@example.com", "eva@example.com", "luis@example.com"}

    stats = client.get("/api/statistics").json()
    assert stats["total_registrations"] == 3
    assert stats["most_popular_plan"] == "Inversión Compartida - Modalidad Aurora"

    filtered = client.get("/api/statistics", params={"plan": "Financiación Total"}).json()
    assert filtered["total_registrations"] == 1
    assert filtered["plans"] == [{"name": "Financiación Total", "count": 1, "percentage": "100.0"}]


def test_api_projection(client):
    assert client.get("/api/projection").json()["months"] == []

    submit(client, name="Ana", email="ana@example.com")
    submit(client, name="Luis", email="luis@example.com")

    projection = client.get("/api/projection").json()
    assert projection["total_registrations"] == 2
    assert projection["active_registrations"] == 1
    assert projection["dropped_registrations"] == 1
    assert len(projection["months"]) == 12
    assert projection["months"][0]["total_revenue"] == 125 + 420
    assert projection["total_revenue"] == 4020


def test_api_delete_all(client):
    submit(client)
    submit(client)

    response = client.delete("/api/registrations")
    assert response.json() == {"ok": True, "deleted": 2}
    assert client.get("/api/registrations").json() == []


def test_api_requires_key_when_configured(secured_client):
    assert secured_client.get("/api/registrations").status_code == 401
    assert secured_client.get("/api/registrations", headers={"X-API-KEY": "wrong"}).status_code == 401
    assert secured_client.get("/api/registrations", headers={"X-API-KEY": "secret"}).status_code == 200


def test_api_database_failure_is_503(client, monkeypatch):
    def fail():
        raise PersistenceError("No se pudieron cargar los registros.")

    monkeypatch.setattr(client.app.state.engine, "list_registrations", fail)

    response = client.get("/api/registrations")
    assert response.status_code == 503
    assert response.json()["detail"] == "No se pudieron cargar los registros."


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "redis": "ok", "database": "ok"}
