"""Romanian counties and the main cities listed for each of them."""

from typing import Dict, List

ROMANIAN_LOCATIONS: Dict[str, List[str]] = {
    "Alba": ["Alba Iulia", "Aiud", "Blaj", "Sebeș", "Cugir"],
    "Arad": ["Arad", "Ineu", "Lipova", "Nădlac", "Pecica"],
    "Argeș": ["Pitești", "Câmpulung", "Curtea de Argeș", "Mioveni", "Costești"],
    "Bacău": ["Bacău", "Onești", "Moinești", "Comănești", "Buhuși"],
    "Bihor": ["Oradea", "Salonta", "Beiuș", "Marghita", "Aleșd"],
    "Bistrița-Năsăud": ["Bistrița", "Năsăud", "Beclean", "Sângeorz-Băi"],
    "Botoșani": ["Botoșani", "Dorohoi", "Darabani", "Săveni", "Bucecea"],
    "Brașov": ["Brașov", "Făgăraș", "Săcele", "Zărnești", "Codlea"],
    "Brăila": ["Brăila", "Ianca", "Însurăței", "Făurei"],
    "București": ["Sector 1", "Sector 2", "Sector 3", "Sector 4", "Sector 5", "Sector 6"],
    "Buzău": ["Buzău", "Râmnicu Sărat", "Nehoiu", "Pogoanele", "Pătârlagele"],
    "Caraș-Severin": ["Reșița", "Caransebeș", "Oravița", "Moldova Nouă", "Băile Herculane"],
    "Călărași": ["Călărași", "Oltenița", "Budești", "Lehliu Gară", "Fundulea"],
    "Cluj": ["Cluj-Napoca", "Turda", "Dej", "Câmpia Turzii", "Gherla"],
    "Constanța": ["Constanța", "Mangalia", "Medgidia", "Cernavodă", "Năvodari"],
    "Covasna": ["Sfântu Gheorghe", "Târgu Secuiesc", "Covasna", "Baraolt", "Întorsura Buzăului"],
    "Dâmbovița": ["Târgoviște", "Moreni", "Pucioasa", "Găești", "Titu"],
    "Dolj": ["Craiova", "Băilești", "Calafat", "Filiași", "Dăbuleni"],
    "Galați": ["Galați", "Tecuci", "Târgu Bujor", "Berești"],
    "Giurgiu": ["Giurgiu", "Bolintin-Vale", "Mihăilești"],
    "Gorj": ["Târgu Jiu", "Motru", "Rovinari", "Târgu Cărbunești", "Novaci"],
    "Harghita": ["Miercurea Ciuc", "Odorheiu Secuiesc", "Gheorgheni", "Toplița", "Bălan"],
    "Hunedoara": ["Deva", "Hunedoara", "Petroșani", "Orăștie", "Brad"],
    "Ialomița": ["Slobozia", "Fetești", "Urziceni", "Țăndărei", "Amara"],
    "Iași": ["Iași", "Pașcani", "Târgu Frumos", "Hârlău", "Podu Iloaiei"],
    "Ilfov": ["Voluntari", "Pantelimon", "Buftea", "Popești-Leordeni", "Bragadiru"],
    "Maramureș": ["Baia Mare", "Sighetu Marmației", "Borșa", "Vișeu de Sus", "Târgu Lăpuș"],
    "Mehedinți": ["Drobeta-Turnu Severin", "Orșova", "Strehaia", "Vânju Mare", "Baia de Aramă"],
    "Mureș": ["Târgu Mureș", "Sighișoara", "Reghin", "Târnăveni", "Luduș"],
    "Neamț": ["Piatra Neamț", "Roman", "Târgu Neamț", "Bicaz", "Roznov"],
    "Olt": ["Slatina", "Caracal", "Balș", "Corabia", "Scornicești"],
    "Prahova": ["Ploiești", "Câmpina", "Sinaia", "Azuga", "Bușteni"],
    "Satu Mare": ["Satu Mare", "Carei", "Negrești-Oaș", "Tășnad", "Ardud"],
    "Sălaj": ["Zalău", "Șimleu Silvaniei", "Jibou", "Cehu Silvaniei"],
    "Sibiu": ["Sibiu", "Mediaș", "Cisnădie", "Avrig", "Agnita"],
    "Suceava": ["Suceava", "Fălticeni", "Rădăuți", "Câmpulung Moldovenesc", "Vatra Dornei"],
    "Teleorman": ["Alexandria", "Turnu Măgurele", "Roșiori de Vede", "Zimnicea", "Videle"],
    "Timiș": ["Timișoara", "Lugoj", "Sânnicolau Mare", "Jimbolia", "Buziaș"],
    "Tulcea": ["Tulcea", "Babadag", "Măcin", "Isaccea", "Sulina"],
    "Vaslui": ["Vaslui", "Bârlad", "Huși", "Negrești", "Murgeni"],
    "Vâlcea": ["Râmnicu Vâlcea", "Drăgășani", "Băbeni", "Călimănești", "Brezoi"],
    "Vrancea": ["Focșani", "Adjud", "Mărășești", "Panciu", "Odobești"],
}


def cities_for_county(county: str) -> List[str]:
    return list(ROMANIAN_LOCATIONS.get(county, []))

