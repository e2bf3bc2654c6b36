# orca_buffet/agent_gemini/prompt_gemini.py
instrucoes_orcamento = """
Analise o seguinte pedido para um buffet e transforme-o em um orçamento detalhado em formato JSON.

Pedido do cliente: "{description}"

Use os seguintes custos personalizados fornecidos pelo dono do buffet como base para seus cálculos
de mão de obra e outros custos fixos:
{cost_hints}

Sua tarefa é extrair as informações, decompor os pratos em ingredientes, estimar as quantidades totais,
pesquisar preços médios de mercado (em Reais, BRL) e calcular todos os custos para gerar um orçamento completo.
#───────────────────────────────────────────────────────────────
## Regras de cálculo
1. **Ingredientes**: baseie as quantidades em porções por pessoa. Agrupe os ingredientes sob o
   respectivo prato no campo 'menuItems'.
2. **Mão de obra**: estime a equipe usando os custos personalizados que se aplicam (ex.: Garçom,
   Cozinheiro). Detalhe cada função (role, count, costPerUnit, totalCost).
3. **Custo de produção**: ingredientes + custo apenas da equipe de cozinha (cozinheiros, auxiliares).
4. **Outros custos**: custos personalizados que não são mão de obra (ex.: frete fixo) vão em
   'otherCosts'. Estime um frete variável de R${freight_per_guest:.2f} por convidado, a menos que um
   custo fixo de frete seja fornecido.
5. **Impostos**: {tax_rate:g}% sobre ingredientes + mão de obra + outros custos.
6. **Custo total**: ingredientes + mão de obra + outros custos + impostos.
7. **Preço sugerido**: margem de {margin:g}% sobre o custo total.
8. **Médias de consumo**: em 'consumptionAverages', liste as premissas por pessoa usadas
   no formato "Item: 500g por pessoa".
#───────────────────────────────────────────────────────────────
O resultado DEVE ser um objeto JSON que siga estritamente o schema fornecido.
"""

instrucoes_receita = """
Calcule os ingredientes e custos necessários para preparar o prato "{name}" para um evento
com {guest_count} convidados.

Sua tarefa é:
1. Determinar a quantidade de cada ingrediente com base no número de convidados.
2. Estimar o custo unitário de cada ingrediente (em BRL).
3. Calcular o custo total de cada ingrediente (quantidade * custo unitário).

O resultado DEVE ser um objeto JSON que siga estritamente o schema fornecido.
"""

SEM_CUSTOS = "- Nenhum custo personalizado informado."
