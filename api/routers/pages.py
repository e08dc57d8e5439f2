"""
Dashboard pages.

Minimal server-rendered HTML: the login form, and the ledger screen with its
aggregates, the sale form and the sales table. The page holds no state of its
own; the form and the per-row buttons call the sales API (`POST /api/sales`,
`PUT`/`DELETE /api/sales/{id}`) and reload the page.
"""

import html

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from api.dependencies import get_sale_service
from api.routers.auth import SESSION_COOKIE
from domain.sale import SaleStatus
from domain.summary import PRODUCT_CATALOG, summarize
from services.sale_service import SaleService
from services.table_formatter import format_amount


router = APIRouter()

STATUS_LABELS = {
    "pending": "Pendente",
    "delivered": "Entregue",
    "cancelled": "Cancelado",
}

# Product select value that switches the form to free-text name and price.
CUSTOM_PRODUCT = "custom_input"

_PAGE = """<!doctype html>
<html lang="pt-BR">
<head><meta charset="utf-8"><title>{title}</title></head>
<body>
{body}
</body>
</html>
"""

_LOGIN_FORM = """<h1>Painel de Vendas</h1>
<form id="login">
  <input type="password" name="password" placeholder="Senha" required>
  <button type="submit">Entrar</button>
</form>
<script>
document.getElementById("login").addEventListener("submit", async (event) => {
  event.preventDefault();
  const password = event.target.password.value;
  const response = await fetch("/api/login", {
    method: "POST",
    headers: {"Content-Type": "application/json"},
    body: JSON.stringify({password}),
  });
  if (response.ok) { window.location.href = "/"; } else { alert("Senha incorreta"); }
});
</script>"""

_SALE_FORM = """<form id="sale-form">
  <input type="hidden" name="id" value="">
  <select name="product" id="product">
    <option value="">Selecione um produto</option>
{product_options}
    <option value="{custom}">Outro (digitar)</option>
  </select>
  <input type="text" name="name" placeholder="Produto" required>
  <input type="number" name="value" placeholder="Valor" min="0" step="0.01" required>
  <input type="text" name="buyer" placeholder="Comprador">
  <select name="status">
{status_options}
  </select>
  <button type="submit" id="sale-submit">Adicionar</button>
  <button type="button" id="sale-cancel" hidden>Cancelar</button>
</form>"""

_DASHBOARD_SCRIPT = """<script>
const form = document.getElementById("sale-form");
const field = (name) => form.elements.namedItem(name);
const submitButton = document.getElementById("sale-submit");
const cancelButton = document.getElementById("sale-cancel");

function resetForm() {
  form.reset();
  field("id").value = "";
  submitButton.textContent = "Adicionar";
  cancelButton.hidden = true;
}

async function send(method, url, body) {
  const response = await fetch(url, {
    method,
    headers: {"Content-Type": "application/json"},
    body: body === undefined ? undefined : JSON.stringify(body),
  });
  if (!response.ok) {
    const detail = await response.text();
    alert("Erro ao salvar: " + detail);
    return false;
  }
  return true;
}

field("product").addEventListener("change", () => {
  const option = field("product").selectedOptions[0];
  if (field("product").value === "custom_input") {
    field("name").value = "";
    field("value").value = "";
    field("name").focus();
  } else if (option.dataset.price) {
    field("name").value = field("product").value;
    field("value").value = option.dataset.price;
  }
});

form.addEventListener("submit", async (event) => {
  event.preventDefault();
  const sale = {
    name: field("name").value,
    value: field("value").value,
    buyer: field("buyer").value,
    status: field("status").value,
  };
  const saved = field("id").value
    ? await send("PUT", "/api/sales/" + encodeURIComponent(field("id").value), sale)
    : await send("POST", "/api/sales", sale);
  if (saved) { window.location.reload(); }
});

cancelButton.addEventListener("click", resetForm);

document.querySelectorAll("button.edit-sale").forEach((button) => {
  button.addEventListener("click", () => {
    const sale = button.dataset;
    field("id").value = sale.id;
    field("name").value = sale.name;
    field("value").value = sale.value;
    field("buyer").value = sale.buyer;
    field("status").value = sale.status;
    const known = Array.from(field("product").options).some((o) => o.value === sale.name);
    field("product").value = known ? sale.name : "custom_input";
    submitButton.textContent = "Salvar";
    cancelButton.hidden = false;
  });
});

document.querySelectorAll("button.delete-sale").forEach((button) => {
  button.addEventListener("click", async () => {
    if (!confirm("Tem certeza que deseja excluir?")) { return; }
    if (await send("DELETE", "/api/sales/" + encodeURIComponent(button.dataset.id))) {
      window.location.reload();
    }
  });
});
</script>"""


def _attr(value: str) -> str:
    return html.escape(value, quote=True)


def render_sale_form() -> str:
    """The create/edit form with the product catalog and status choices."""
    product_options = "\n".join(
        f'    <option value="{_attr(name)}" data-price="{format_amount(price)}">{html.escape(name)}</option>'
        for name, price in PRODUCT_CATALOG
    )
    status_options = "\n".join(
        f'    <option value="{status.value}">{STATUS_LABELS[status.value]}</option>'
        for status in SaleStatus
    )
    return _SALE_FORM.format(
        product_options=product_options,
        status_options=status_options,
        custom=CUSTOM_PRODUCT,
    )


@router.get("/login", response_class=HTMLResponse, include_in_schema=False)
def login_page(request: Request):
    if request.cookies.get(SESSION_COOKIE):
        return RedirectResponse(url="/", status_code=303)
    return HTMLResponse(_PAGE.format(title="Login", body=_LOGIN_FORM))


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def dashboard(service: SaleService = Depends(get_sale_service)):
    sales = service.list_sales()
    summary = summarize(sales)

    rows = "\n".join(
        "<tr><td>{name}</td><td>{buyer}</td><td>R$ {value}</td><td>{status}</td>"
        "<td>{actions}</td></tr>".format(
            name=html.escape(sale.name),
            buyer=html.escape(sale.buyer),
            value=format_amount(sale.value),
            status=STATUS_LABELS.get(sale.status.value, sale.status.value),
            actions=(
                f'<button type="button" class="edit-sale" data-id="{_attr(sale.sale_id)}"'
                f' data-name="{_attr(sale.name)}" data-value="{format_amount(sale.value)}"'
                f' data-buyer="{_attr(sale.buyer)}" data-status="{sale.status.value}">Editar</button>'
                f' <button type="button" class="delete-sale" data-id="{_attr(sale.sale_id)}">Excluir</button>'
            ),
        )
        for sale in reversed(sales)
    )

    body = f"""<h1>Painel de Vendas</h1>
<ul>
  <li>Total Geral: R$ {format_amount(summary.total_revenue)}</li>
  <li>Lucro Líquido (Entregues): R$ {format_amount(summary.net_profit)}</li>
  <li>Em Aberto: R$ {format_amount(summary.pending_revenue)}</li>
</ul>
{render_sale_form()}
<table>
<thead><tr><th>Produto</th><th>Comprador</th><th>Valor</th><th>Status</th><th>Ações</th></tr></thead>
<tbody>
{rows}
</tbody>
</table>
{_DASHBOARD_SCRIPT}"""
    return HTMLResponse(_PAGE.format(title="Painel de Vendas", body=body))
